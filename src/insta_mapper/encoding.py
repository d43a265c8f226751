"""Repair of the mojibake found in Instagram/Facebook JSON exports.

The exporter writes UTF-8 text as if every byte were a Latin-1 code point, so
``"café"`` arrives as ``"cafÃ©"``. Re-encoding such a string as Latin-1 gives
back the original UTF-8 bytes.

The repair runs unconditionally on every string of every loaded document.
Running it twice, or on text that is already correct but happens to stay
inside the Latin-1 range, can corrupt it again.
"""

from typing import Any


def repair_text(value: str) -> str:
    """Undo one Latin-1 mis-decoding, or return ``value`` unchanged."""
    try:
        return value.encode('latin-1').decode('utf-8')
    except (UnicodeEncodeError, UnicodeDecodeError):
        return value


def repair_encoding(data: Any) -> Any:
    """Apply :func:`repair_text` to every string leaf of a JSON value."""
    if isinstance(data, str):
        return repair_text(data)
    if isinstance(data, dict):
        return {key: repair_encoding(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [repair_encoding(item) for item in data]
    return data
