"""Serialization helpers for the JSON wire format"""

from .serialization import to_json, from_json

__all__ = ["to_json", "from_json"]
