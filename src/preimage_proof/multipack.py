"""Packing bit strings into field-element public inputs.

Bits are cut into chunks of ``capacity`` bits (the field's safe bit width);
each chunk is read as a little-endian number. The in-circuit and plaintext
sides use the same rule so the verifier can rebuild the public inputs.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .bits import bytes_to_bits_le
from .boolean import Boolean
from .constraint_system import ConstraintSystem, LinearCombination


def _chunks(items: Sequence, size: int):
    if size <= 0:
        raise ValueError("capacity must be positive")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def compute_multipacking(bits: Sequence[bool], capacity: int) -> List[int]:
    result = []
    for chunk in _chunks(bits, capacity):
        value = 0
        for i, bit in enumerate(chunk):
            if bit:
                value |= 1 << i
        result.append(value)
    return result


def pack_digest(digest: bytes, capacity: int) -> List[int]:
    return compute_multipacking(bytes_to_bits_le(digest), capacity)


def pack_into_inputs(cs: ConstraintSystem, bits: Sequence[Boolean]) -> None:
    for i, chunk in enumerate(_chunks(bits, cs.capacity)):
        lc = LinearCombination()
        value: Optional[int] = 0
        coeff = 1
        for bit in chunk:
            lc += bit.lc(cs.ONE, coeff)
            bit_value = bit.get_value()
            if value is not None:
                value = None if bit_value is None else value + (coeff if bit_value else 0)
            coeff <<= 1
        packed = cs.alloc_input(f"input {i}", value)
        # num * 1 = input
        cs.enforce(f"packing constraint {i}", lc, LinearCombination({cs.ONE: 1}), LinearCombination({packed: 1}))
