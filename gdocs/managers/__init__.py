"""
Google Docs Managers

Managers that wrap the Docs API service for text and paragraph lookups.
"""

from .validation_manager import ValidationManager
from .text_location_manager import TextLocationManager

__all__ = [
    "ValidationManager",
    "TextLocationManager",
]
