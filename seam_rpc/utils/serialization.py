"""
JSON wire serialization

Converts JSON-RPC message dictionaries to and from the compact UTF-8 JSON
text carried in one transport frame.
"""

import json
from typing import Any, Dict, Union

# No whitespace between tokens: {"id":1,"method":"help"}
_SEPARATORS = (",", ":")


def to_json(message: Dict[str, Any]) -> str:
    """Convert a message dictionary to JSON text

    Args:
        message: Request, Response or Notification dictionary

    Returns:
        str: Compact JSON string
    """
    return json.dumps(message, separators=_SEPARATORS, ensure_ascii=False)


def from_json(data: Union[str, bytes, bytearray]) -> Any:
    """Parse one frame of JSON text

    Args:
        data: JSON text; bytes are decoded as UTF-8

    Returns:
        Any: Parsed value

    Raises:
        json.JSONDecodeError: Malformed JSON
        TypeError: data is not text or bytes
        UnicodeDecodeError: bytes are not valid UTF-8
    """
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    return json.loads(data)
