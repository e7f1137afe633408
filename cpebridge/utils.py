"""Small byte-level helpers shared by the cipher modules."""

from __future__ import annotations

_REDUCTION = 0x1B


def double_byte(a: int) -> int:
    """Multiply a byte by x in the AES field GF(2^8)."""
    if not 0 <= a <= 0xFF:
        raise ValueError(f"byte value out of range: {a!r}")
    return ((a << 1) ^ ((a >> 7) * _REDUCTION)) & 0xFF


def compare(a: bytes, b: bytes) -> int:
    """Compare two equal-length byte strings without early exit.

    Returns 0 when they are equal and a non-zero value otherwise.
    """
    if len(a) != len(b):
        raise ValueError("sequences must have the same length")
    result = 0
    for x, y in zip(a, b):
        result |= x ^ y
    return result