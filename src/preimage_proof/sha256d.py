"""Double SHA-256 gadget over little-endian-within-byte bits."""

from __future__ import annotations

from typing import List, Sequence

from .bits import swap_bit_endianness
from .boolean import Boolean
from .constraint_system import ConstraintSystem
from .sha256 import sha256


def sha256d(cs: ConstraintSystem, data: Sequence[Boolean]) -> List[Boolean]:
    """SHA-256(SHA-256(data)); input and output bits are little-endian within each byte."""
    message = swap_bit_endianness(data)

    with cs.namespace("SHA-256(input)"):
        mid = sha256(cs, message)
    # the gadget's output ordering is already its input ordering
    with cs.namespace("SHA-256(mid)"):
        digest = sha256(cs, mid)

    return swap_bit_endianness(digest)
