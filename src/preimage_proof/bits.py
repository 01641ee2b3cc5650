"""Bit and byte ordering helpers.

Circuits in this package carry bytes as bits in little-endian order within
each byte (bit 0 is the least significant bit of the first byte); SHA-256
works on big-endian bits. ``swap_bit_endianness`` converts between the two.
"""

from __future__ import annotations

from typing import List, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def swap_bit_endianness(bits: Sequence[T]) -> List[T]:
    """Reverse the order of the bits inside every byte, keeping byte order."""
    if len(bits) % 8 != 0:
        raise ValueError(f"Bit length must be a multiple of 8; received {len(bits)}")
    return [bit for start in range(0, len(bits), 8) for bit in reversed(bits[start : start + 8])]


def bytes_to_bits_le(data: bytes) -> List[bool]:
    arr = np.frombuffer(bytes(data), dtype=np.uint8)
    return np.unpackbits(arr, bitorder="little").astype(bool).tolist()
