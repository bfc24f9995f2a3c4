"""
Split-and-locate fallback for phrases containing an apostrophe.

Phrases like "that's almost 20% more" often fail whole-phrase lookup: the
document may hold a curly apostrophe where the query has a straight one, or
a styling boundary may fall on the apostrophe. This module splits such a
phrase at a contraction-shaped apostrophe and locates both halves
independently. It is a heuristic over a fixed list of patterns, not a
grammar; both halves must be found for the lookup to succeed.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from gdocs.docs_types import MatchRange
from gdocs.text_normalization import APOSTROPHE_CHARS

logger = logging.getLogger(__name__)

_APOSTROPHE_CLASS = "[" + re.escape(APOSTROPHE_CHARS) + "]"

# (suffix regex, description); the suffix's last letter is optional
APOSTROPHE_PATTERNS = [
    (r"s?", "word's phrase..."),
    (r"re?", "word're phrase..."),
    (r"ll?", "word'll phrase..."),
    (r"ve?", "word've phrase..."),
    (r"d?", "word'd phrase..."),
    (r"t?", "word't phrase..."),
]

_COMPILED_PATTERNS = [
    (re.compile(rf"(\w+){_APOSTROPHE_CLASS}({suffix}\s+.+)", re.IGNORECASE), description)
    for suffix, description in APOSTROPHE_PATTERNS
]

RangeFinder = Callable[[str, int], Optional[MatchRange]]


@dataclass(frozen=True)
class PhraseSplit:
    """A phrase split at its apostrophe, e.g. "that" / "s almost 20% more"."""
    before: str
    after: str
    pattern: str


@dataclass(frozen=True)
class ApostrophePhraseMatch:
    """
    Result of an apostrophe-phrase lookup.

    ranges holds (before, after) when the phrase was split, or the single
    whole-phrase range when no pattern applied.
    """
    ranges: Tuple[MatchRange, ...]
    split: Optional[PhraseSplit] = None

    @property
    def is_split(self) -> bool:
        return self.split is not None


def split_apostrophe_phrase(text: str) -> Optional[PhraseSplit]:
    """
    Split text at the first contraction-shaped apostrophe.

    Patterns are tried in a fixed order and the first one that matches wins.

    Returns:
        PhraseSplit, or None if no pattern matches
    """
    for regex, description in _COMPILED_PATTERNS:
        match = regex.search(text)
        if match:
            return PhraseSplit(
                before=match.group(1),
                after=match.group(2),
                pattern=description,
            )
    return None


def locate_apostrophe_phrase(
    find_range: RangeFinder,
    text: str,
    instance: int = 1
) -> Optional[ApostrophePhraseMatch]:
    """
    Locate an apostrophe phrase, splitting it when a pattern applies.

    Args:
        find_range: Callable (search_text, instance) -> MatchRange or None
        text: Phrase to locate
        instance: Occurrence requested for each lookup (1-based)

    Returns:
        ApostrophePhraseMatch, or None if the whole phrase (no split) or
        either half (split) could not be found
    """
    split = split_apostrophe_phrase(text)

    if split is None:
        whole_range = find_range(text, instance)
        if whole_range is None:
            return None
        return ApostrophePhraseMatch(ranges=(whole_range,))

    logger.debug(
        f"Split {text!r} as {split.pattern}: {split.before!r} / {split.after!r}"
    )
    before_range = find_range(split.before, instance)
    after_range = find_range(split.after, instance)

    if before_range is None or after_range is None:
        logger.info(
            f"Apostrophe phrase {text!r} only partially found "
            f"(before={before_range}, after={after_range})"
        )
        return None

    return ApostrophePhraseMatch(ranges=(before_range, after_range), split=split)
