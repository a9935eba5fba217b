"""Canonical byte buffers from heterogeneous collector output.

Collectors hand back raw bytes, hex text, free text or an object carrying a
``hex`` field.  Instead of sniffing shapes at every call site, each value is
classified once into a closed set of variants:

* :class:`BytesValue` — already binary (or free text, as UTF-8)
* :class:`HexText` — validated hex digits, parsed to binary
* :class:`Fallback` — nothing usable; replaced by fresh random bytes

:func:`normalize` never raises and never blocks.
"""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass
from typing import Union

import numpy as np

FALLBACK_BYTES = 32
FIXED_HEX_WIDTH = 64  # 32 bytes

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


def is_hex(text: str) -> bool:
    """True for non-empty, even-length strings of hex digits."""
    return bool(_HEX_RE.fullmatch(text)) and len(text) % 2 == 0


def _strip_0x(text: str) -> str:
    return text[2:] if text[:2] in ("0x", "0X") else text


@dataclass(frozen=True)
class BytesValue:
    data: bytes

    def to_bytes(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class HexText:
    text: str

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.text)


@dataclass(frozen=True)
class Fallback:
    reason: str = "no data"

    def to_bytes(self) -> bytes:
        return secrets.token_bytes(FALLBACK_BYTES)


Variant = Union[BytesValue, HexText, Fallback]


def _hex_field(value) -> str | None:
    if isinstance(value, dict):
        field = value.get("hex")
    else:
        field = getattr(value, "hex", None)
    return field if isinstance(field, str) else None


def classify(value) -> Variant:
    """Map a collector's return value onto one variant."""
    if value is None:
        return Fallback("missing value")
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        return BytesValue(data) if data else Fallback("empty buffer")
    if isinstance(value, np.ndarray):
        data = value.astype(np.uint8).tobytes()
        return BytesValue(data) if data else Fallback("empty array")
    if isinstance(value, str):
        text = _strip_0x(value)
        if not text:
            return Fallback("empty string")
        if is_hex(text):
            return HexText(text.lower())
        return BytesValue(text.encode("utf-8"))
    field = _hex_field(value)
    if field is not None:
        text = _strip_0x(field)
        if is_hex(text):
            return HexText(text.lower())
        return Fallback("invalid hex field")
    return Fallback(f"unsupported type {type(value).__name__}")


def normalize(value) -> bytes:
    """Return exactly one canonical byte buffer for *value*."""
    return classify(value).to_bytes()


def fixed_width_hex(data: bytes, width: int = FIXED_HEX_WIDTH) -> str:
    """Hex of *data* right-padded with ``0`` and truncated to *width* chars."""
    return data.hex().ljust(width, "0")[:width]
