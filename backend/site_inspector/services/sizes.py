"""
Byte-size helpers for PHP-style shorthand values ("256M", "1G", "-1").
"""
import re

KB_IN_BYTES = 1024
MB_IN_BYTES = 1024 * KB_IN_BYTES
GB_IN_BYTES = 1024 * MB_IN_BYTES

# Sentinel for "no limit"
UNLIMITED = -1

_SHORTHAND = re.compile(r"^\s*(-?\d+)\s*([kmg]?)b?\s*$", re.IGNORECASE)
_MULTIPLIERS = {"": 1, "k": KB_IN_BYTES, "m": MB_IN_BYTES, "g": GB_IN_BYTES}


def parse_size(value) -> int:
    """Convert a shorthand size to bytes.

    Integers pass through. Any negative value means unlimited.
    """
    if isinstance(value, int):
        return UNLIMITED if value < 0 else value

    match = _SHORTHAND.match(str(value))
    if not match:
        raise ValueError(f"Unrecognised size value: {value!r}")

    number = int(match.group(1))
    if number < 0:
        return UNLIMITED
    return number * _MULTIPLIERS[match.group(2).lower()]


def format_bytes(size: int, decimals: int = 0) -> str:
    """Human readable byte count, e.g. 268435456 -> '256 MB'."""
    if size == UNLIMITED:
        return "unlimited"

    for unit, factor in (("GB", GB_IN_BYTES), ("MB", MB_IN_BYTES), ("KB", KB_IN_BYTES)):
        if size >= factor:
            return f"{size / factor:.{decimals}f} {unit}"
    return f"{size} B"
