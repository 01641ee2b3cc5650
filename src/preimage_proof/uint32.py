"""32-bit word gadget used by the SHA-256 compression function."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .boolean import AllocatedBit, Boolean
from .constraint_system import ConstraintSystem, LinearCombination

MASK = 0xFFFFFFFF


def _value_of(bits: Sequence[Boolean]) -> Optional[int]:
    value = 0
    for i, bit in enumerate(bits):
        bit_value = bit.get_value()
        if bit_value is None:
            return None
        if bit_value:
            value |= 1 << i
    return value


@dataclass(slots=True)
class UInt32:
    # least significant bit first
    bits: List[Boolean]
    value: Optional[int]

    @classmethod
    def constant(cls, value: int) -> "UInt32":
        return cls([Boolean.constant((value >> i) & 1 == 1) for i in range(32)], value & MASK)

    @classmethod
    def from_bits(cls, bits: Sequence[Boolean]) -> "UInt32":
        if len(bits) != 32:
            raise ValueError(f"UInt32 needs 32 bits; received {len(bits)}")
        return cls(list(bits), _value_of(bits))

    @classmethod
    def from_bits_be(cls, bits: Sequence[Boolean]) -> "UInt32":
        if len(bits) != 32:
            raise ValueError(f"UInt32 needs 32 bits; received {len(bits)}")
        return cls.from_bits(list(reversed(bits)))

    def into_bits_be(self) -> List[Boolean]:
        return list(reversed(self.bits))

    def rotr(self, by: int) -> "UInt32":
        by %= 32
        bits = self.bits[by:] + self.bits[:by]
        value = None if self.value is None else ((self.value >> by) | (self.value << (32 - by))) & MASK
        return UInt32(bits, value)

    def shr(self, by: int) -> "UInt32":
        bits = self.bits[by:] + [Boolean.constant(False)] * by
        value = None if self.value is None else self.value >> by
        return UInt32(bits, value)

    def xor(self, cs: ConstraintSystem, other: "UInt32") -> "UInt32":
        bits = []
        for i, (a, b) in enumerate(zip(self.bits, other.bits)):
            with cs.namespace(f"xor of bit {i}"):
                bits.append(Boolean.xor(cs, a, b))
        value = None if self.value is None or other.value is None else self.value ^ other.value
        return UInt32(bits, value)

    @classmethod
    def _triop(cls, cs: ConstraintSystem, name: str, a: "UInt32", b: "UInt32", c: "UInt32", op) -> "UInt32":
        bits = []
        for i, (x, y, z) in enumerate(zip(a.bits, b.bits, c.bits)):
            with cs.namespace(f"{name} {i}"):
                bits.append(op(cs, x, y, z))
        return cls.from_bits(bits)

    @classmethod
    def sha256_ch(cls, cs: ConstraintSystem, a: "UInt32", b: "UInt32", c: "UInt32") -> "UInt32":
        return cls._triop(cs, "ch", a, b, c, Boolean.sha256_ch)

    @classmethod
    def sha256_maj(cls, cs: ConstraintSystem, a: "UInt32", b: "UInt32", c: "UInt32") -> "UInt32":
        return cls._triop(cs, "maj", a, b, c, Boolean.sha256_maj)

    @classmethod
    def addmany(cls, cs: ConstraintSystem, operands: Sequence["UInt32"]) -> "UInt32":
        """Sum of the operands modulo 2^32, enforced by one linear constraint."""
        if not 2 <= len(operands) <= 10:
            raise ValueError(f"addmany expects 2 to 10 operands; received {len(operands)}")

        max_value = len(operands) * MASK
        result_value: Optional[int] = 0
        lc = LinearCombination()
        all_constants = True
        for operand in operands:
            if result_value is not None:
                result_value = None if operand.value is None else result_value + operand.value
            coeff = 1
            for bit in operand.bits:
                lc += bit.lc(cs.ONE, coeff)
                all_constants = all_constants and bit.is_constant
                coeff <<= 1

        if all_constants:
            return cls.constant(result_value)

        result_bits: List[Boolean] = []
        result_lc = LinearCombination()
        coeff = 1
        i = 0
        while max_value:
            bit_value = None if result_value is None else (result_value >> i) & 1 == 1
            with cs.namespace(f"result bit {i}"):
                bit = AllocatedBit.alloc(cs, bit_value)
            result_lc.add_term(bit.variable, coeff)
            result_bits.append(Boolean.from_bit(bit))
            max_value >>= 1
            coeff <<= 1
            i += 1

        cs.enforce("modular addition", lc, LinearCombination({cs.ONE: 1}), result_lc)
        modular_value = None if result_value is None else result_value & MASK
        return cls(result_bits[:32], modular_value)
