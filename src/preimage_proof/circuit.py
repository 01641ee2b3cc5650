"""Circuit proving knowledge of an 80-byte preimage of a double SHA-256 digest."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .bits import bytes_to_bits_le
from .boolean import AllocatedBit, Boolean
from .constraint_system import ConstraintSystem
from .errors import PreimageLengthError
from .multipack import pack_into_inputs
from .sha256d import sha256d

PREIMAGE_LENGTH = 80


@dataclass(slots=True)
class PreimageCircuit:
    """``preimage=None`` builds the same constraints with every bit unknown.

    That shape is what parameter generation and verification-only synthesis
    use; proving passes the real 80 bytes.
    """

    preimage: Optional[bytes] = None

    def __post_init__(self) -> None:
        if self.preimage is not None:
            if not isinstance(self.preimage, (bytes, bytearray)):
                raise TypeError(f"Preimage must be bytes; received {type(self.preimage).__name__}")
            self.preimage = bytes(self.preimage)
            if len(self.preimage) != PREIMAGE_LENGTH:
                raise PreimageLengthError(
                    f"Preimage must be {PREIMAGE_LENGTH} bytes; received {len(self.preimage)}"
                )

    def bit_values(self) -> List[Optional[bool]]:
        if self.preimage is None:
            return [None] * (PREIMAGE_LENGTH * 8)
        return bytes_to_bits_le(self.preimage)

    def synthesize(self, cs: ConstraintSystem) -> None:
        preimage_bits = []
        for i, value in enumerate(self.bit_values()):
            with cs.namespace(f"preimage bit {i}"):
                preimage_bits.append(Boolean.from_bit(AllocatedBit.alloc(cs, value)))

        with cs.namespace("SHA-256(preimage)"):
            digest = sha256d(cs, preimage_bits)

        with cs.namespace("pack hash"):
            pack_into_inputs(cs, digest)
