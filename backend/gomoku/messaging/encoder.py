"""
JSON encoder/decoder for the wire format.

Every message is a single JSON object, `{"type": str, "payload": object}`.
"""

import json
from typing import Any

# Client messages are tiny; anything bigger is not a legitimate envelope.
MAX_MESSAGE_SIZE = 4096  # UTF-8 bytes


class DecodeError(Exception):
    """Error raised when an inbound frame is not a JSON object."""


def encode(data: dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def decode(raw: str | bytes) -> dict[str, Any]:
    """
    Decode a text (or UTF-8 binary) frame into a dict.

    Raises DecodeError if the frame is too large, not JSON, or not an object.
    """
    size = len(raw.encode("utf-8")) if isinstance(raw, str) else len(raw)
    if size > MAX_MESSAGE_SIZE:
        raise DecodeError(f"message too large: {size} bytes (max {MAX_MESSAGE_SIZE})")
    try:
        result = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"failed to decode JSON: {e}") from e

    if not isinstance(result, dict):
        raise DecodeError(f"expected object, got {type(result).__name__}")

    return result
