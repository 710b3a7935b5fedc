"""Utility modules for the Evergreen API."""

from .codec import INVALID, decode, encode
from .validation import validate_app_id

__all__ = [
    "INVALID",
    "decode",
    "encode",
    "validate_app_id",
]
