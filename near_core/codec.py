"""Payload codec for contract arguments, return values and base64 transport."""

import base64
import binascii
import json
from typing import Any, Mapping

from .errors import ArgEncodingError, InvalidBase64

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def encode_args(value: Mapping[str, Any]) -> bytes:
    """Serialize call arguments to compact UTF-8 JSON bytes."""

    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise ArgEncodingError(f"Failed to encode arguments: {exc}") from exc
    return text.encode("utf-8")


def decode_return_value(data: bytes) -> Any:
    """Decode bytes returned by a contract, preferring JSON over plain text."""

    text = bytes(data).decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def format_return_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def decode_base64(text: str) -> bytes:
    """Decode standard or URL-safe base64; missing trailing padding is restored."""

    if not isinstance(text, str):
        raise InvalidBase64(f"Invalid base64 string: {_preview(text)}")
    normalized = text.translate(_URLSAFE_TO_STANDARD)
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise InvalidBase64(f"Invalid base64 string: {_preview(text)}") from exc


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_byte_length(text: str) -> int:
    """Byte length encoded by ``text`` computed from its length and padding only."""

    length = len(text)
    if length == 0:
        return 0
    padding = 0
    if text.endswith("=="):
        padding = 2
    elif text.endswith("="):
        padding = 1
    return (length * 3) // 4 - padding


def decode_text_or_marker(text: str) -> str:
    """Decode base64 storage bytes as UTF-8, or mark them as binary."""

    try:
        return decode_base64(text).decode("utf-8")
    except (InvalidBase64, UnicodeDecodeError):
        return f"[Binary Data: {text}]"


def _preview(text: object, limit: int = 64) -> str:
    rendered = str(text)
    if len(rendered) <= limit:
        return rendered
    return rendered[:limit] + "..."
