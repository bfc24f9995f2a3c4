"""
Text normalization for matching document text.

Google Docs stores whatever punctuation the author typed, so a curly
apostrophe in the document will not byte-match a straight apostrophe in a
query. These helpers fold punctuation and whitespace variants into a small
set of representative characters.
"""
from typing import List, Tuple

# straight, right/left single quote, reversed-9 quote, grave, acute
APOSTROPHE_CHARS = "'\u2019\u2018\u201b\u0060\u00b4"
# curly double quotes, low-9/reversed-9 double quotes, double primes
DOUBLE_QUOTE_CHARS = "\u201c\u201d\u201e\u201f\u2033\u2036"
# en dash, em dash, horizontal bar
DASH_CHARS = "\u2013\u2014\u2015"

_APOSTROPHE_TABLE = str.maketrans({ch: "'" for ch in APOSTROPHE_CHARS})

_PUNCTUATION_TABLE = {
    **{ch: "'" for ch in APOSTROPHE_CHARS},
    **{ch: '"' for ch in DOUBLE_QUOTE_CHARS},
    **{ch: "-" for ch in DASH_CHARS},
}


def normalize_with_offsets(text: str) -> Tuple[str, List[int]]:
    """
    Normalize text and record where each normalized character came from.

    Walks the text one character at a time. Punctuation variants map 1:1 to
    their representative, a run of whitespace (including no-break and the
    Unicode space block) becomes a single space attributed to the first
    character of the run, and leading/trailing whitespace is dropped.

    Args:
        text: Text to normalize

    Returns:
        Tuple of (normalized_text, offsets) where offsets[i] is the position
        in `text` of normalized character i
    """
    chars = []
    offsets = []
    run_start = None

    for i, char in enumerate(text):
        if char.isspace():
            if run_start is None:
                run_start = i
            continue

        if run_start is not None:
            # Leading whitespace never produces output
            if chars:
                chars.append(" ")
                offsets.append(run_start)
            run_start = None

        chars.append(_PUNCTUATION_TABLE.get(char, char))
        offsets.append(i)

    return "".join(chars), offsets


def normalize(text: str) -> str:
    """Canonicalize punctuation and whitespace variants. Idempotent."""
    return normalize_with_offsets(text)[0]


def standardize_apostrophes(text: str) -> str:
    """Replace apostrophe-like characters with a straight apostrophe, nothing else."""
    return text.translate(_APOSTROPHE_TABLE)
