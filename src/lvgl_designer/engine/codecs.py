"""Scalar value codecs: dialect text <-> model values.

Every decoder accepts the raw scalar text and never raises; text that does
not match the expected shape is passed through unchanged (it is usually a
substitution reference or a named constant).
"""

from __future__ import annotations

import re

CONTENT = "content"
CONTENT_TOKENS = frozenset({"content", "size_content", "SIZE_CONTENT", "lv.SIZE.CONTENT"})
DEFAULT_DIMENSION = 100

PUA_RANGES = (
    (0xE000, 0xF8FF),
    (0xF0000, 0xFFFFD),
    (0x100000, 0x10FFFD),
)

_INT_RE = re.compile(r"^[-+]?\d+$")
_FLOAT_RE = re.compile(r"^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$")
_PCT_FUNC_RE = re.compile(r"^lv\.pct\(\s*(-?\d+)\s*\)$")
_HEX_COLOR_RE = re.compile(r"^0[xX]([0-9A-Fa-f]+)$")
_HASH_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
_FR_RE = re.compile(r"^(?:lv\.)?fr\(\s*(\d+)\s*\)$", re.IGNORECASE)
_FR_VALUE_RE = re.compile(r"^(\d+)fr$")
_PERCENT_RE = re.compile(r"^(-?\d+(?:\.\d+)?)\s*%$")
_ESCAPE_U8_RE = re.compile(r"\\U([0-9A-Fa-f]{8})")
_ESCAPE_U4_RE = re.compile(r"\\u([0-9A-Fa-f]{4})")


# Numbers and flags


def decode_number(text: str) -> int | float | str:
    text = text.strip()
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    return text


def decode_int(text: str) -> int | str:
    """Decode whole pixels; fractional values are truncated."""
    value = decode_number(text)
    if isinstance(value, float):
        return int(value)
    return value


def decode_bool(text: str) -> bool | str:
    lowered = text.strip().lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    return text


# Dimensions


def decode_dimension(text: str | None) -> int | str:
    """Decode a position or size to pixels, a percentage, or ``content``."""
    if text is None or not text.strip():
        return DEFAULT_DIMENSION
    text = text.strip()
    if text in CONTENT_TOKENS:
        return CONTENT
    match = _PCT_FUNC_RE.match(text)
    if match:
        return f"{match.group(1)}%"
    if _INT_RE.match(text):
        return int(text)
    return text


def encode_dimension(value: int | str) -> int | str:
    if value == CONTENT:
        return "size_content"
    return value


# Colors


def decode_color(text: str) -> str:
    """Decode a colour literal to ``#RRGGBB``.

    Accepts ``0x`` hex with 3, 6 or 8 digits (8 digits are ARGB, alpha is
    dropped), bare decimals (a packed hex value that was read as an integer)
    and ``#`` hex.  Anything else is returned unchanged.
    """
    text = text.strip()
    if _INT_RE.match(text) and not text.startswith(("-", "+")):
        return f"#{int(text) & 0xFFFFFF:06X}"
    match = _HEX_COLOR_RE.match(text) or _HASH_COLOR_RE.match(text)
    if not match:
        return text
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{int(digits, 16) & 0xFFFFFF:06X}"


def encode_color(value: str) -> str:
    match = _HASH_COLOR_RE.match(value)
    if not match:
        return value
    return f"0x{decode_color(value)[1:]}"


# Opacity


def decode_opacity(text: str) -> float | str:
    """Decode an opacity to a 0..1 fraction."""
    text = text.strip()
    upper = text.upper()
    if upper == "TRANSP":
        return 0.0
    if upper == "COVER":
        return 1.0
    match = _PERCENT_RE.match(text)
    if match:
        return float(match.group(1)) / 100
    value = decode_number(text)
    if isinstance(value, str):
        return value
    if value > 1:
        return round(value / 255, 4)
    return float(value)


def encode_opacity(value: float | str) -> str:
    if isinstance(value, str):
        return value
    percent = round(value * 100, 1)
    if percent == int(percent):
        return f"{int(percent)}%"
    return f"{percent}%"


# Grid tracks


def decode_grid_track(text: str) -> int | str:
    text = text.strip()
    if text in CONTENT_TOKENS:
        return CONTENT
    match = _FR_RE.match(text)
    if match:
        return f"{match.group(1)}fr"
    if _INT_RE.match(text):
        return int(text)
    return text


def encode_grid_track(value: int | str) -> int | str:
    if value == CONTENT:
        return CONTENT
    if isinstance(value, str):
        match = _FR_VALUE_RE.match(value)
        if match:
            return f"fr({match.group(1)})"
    return value


# Text escapes


def is_pua(code_point: int) -> bool:
    return any(low <= code_point <= high for low, high in PUA_RANGES)


def _chr_or_original(match: re.Match[str]) -> str:
    code_point = int(match.group(1), 16)
    if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
        return match.group(0)
    return chr(code_point)


def decode_escapes(text: str) -> str:
    """Replace ``\\UXXXXXXXX`` and ``\\uXXXX`` escapes with the characters."""
    text = _ESCAPE_U8_RE.sub(_chr_or_original, text)
    return _ESCAPE_U4_RE.sub(_chr_or_original, text)


def encode_escapes(text: str) -> str:
    """Replace private-use-area glyphs with ``\\UXXXXXXXX`` escapes."""
    return "".join(
        f"\\U{ord(ch):08X}" if is_pua(ord(ch)) else ch
        for ch in text
    )


def needs_quoting(text: str) -> bool:
    """True for text holding glyphs that are written back as escapes."""
    return any(is_pua(ord(ch)) for ch in text)
