"""
Configuration for the Google Docs text locator.

Settings are read from the environment, with an optional .env file at the
project root loaded first.
"""
import logging
import os

from dotenv import load_dotenv
from googleapiclient.discovery import build

dotenv_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), '.env')
load_dotenv(dotenv_path=dotenv_path)

LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')
DOCS_API_VERSION = os.getenv('DOCS_API_VERSION', 'v1')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = None) -> None:
    """
    Configure root logging for scripts and services embedding the locator.

    Args:
        level: Optional level name. Defaults to the LOG_LEVEL environment variable.
    """
    # Suppress googleapiclient discovery cache warning
    logging.getLogger('googleapiclient.discovery_cache').setLevel(logging.ERROR)

    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)


def build_docs_service(credentials):
    """
    Build a Google Docs API service object.

    Args:
        credentials: Authorized google-auth credentials

    Returns:
        googleapiclient Resource for the Docs API
    """
    return build('docs', DOCS_API_VERSION, credentials=credentials, cache_discovery=False)
