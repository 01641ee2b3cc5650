"""Boolean gadgets.

``AllocatedBit`` is a variable constrained to 0 or 1. ``Boolean`` is the value
carried through circuits: an allocated bit, its negation, or a constant. A bit
value is ``Optional[bool]`` so that the same code path builds the setup shape
(``None`` everywhere) and the proving witness.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constraint_system import ConstraintSystem, LinearCombination, Variable


def _int(value: Optional[bool]) -> Optional[int]:
    return None if value is None else int(value)


@dataclass(frozen=True, slots=True)
class AllocatedBit:
    variable: Variable
    value: Optional[bool]

    @classmethod
    def alloc(cls, cs: ConstraintSystem, value: Optional[bool]) -> "AllocatedBit":
        var = cs.alloc("boolean", _int(value))
        # (1 - a) * a = 0
        cs.enforce("boolean constraint", cs.ONE - var, LinearCombination({var: 1}), LinearCombination())
        return cls(var, value)

    @classmethod
    def xor(cls, cs: ConstraintSystem, a: "AllocatedBit", b: "AllocatedBit") -> "AllocatedBit":
        value = None if a.value is None or b.value is None else a.value != b.value
        result = cs.alloc("xor result", _int(value))
        # (a + a) * b = a + b - c
        cs.enforce(
            "xor constraint",
            a.variable * 2,
            LinearCombination({b.variable: 1}),
            a.variable + b.variable - result,
        )
        return cls(result, value)

    @classmethod
    def and_(cls, cs: ConstraintSystem, a: "AllocatedBit", b: "AllocatedBit") -> "AllocatedBit":
        value = None if a.value is None or b.value is None else a.value and b.value
        result = cs.alloc("and result", _int(value))
        # a * b = c
        cs.enforce(
            "and constraint",
            LinearCombination({a.variable: 1}),
            LinearCombination({b.variable: 1}),
            LinearCombination({result: 1}),
        )
        return cls(result, value)

    @classmethod
    def and_not(cls, cs: ConstraintSystem, a: "AllocatedBit", b: "AllocatedBit") -> "AllocatedBit":
        """a AND (NOT b)"""
        value = None if a.value is None or b.value is None else a.value and not b.value
        result = cs.alloc("and not result", _int(value))
        # a * (1 - b) = c
        cs.enforce(
            "and not constraint",
            LinearCombination({a.variable: 1}),
            cs.ONE - b.variable,
            LinearCombination({result: 1}),
        )
        return cls(result, value)

    @classmethod
    def nor(cls, cs: ConstraintSystem, a: "AllocatedBit", b: "AllocatedBit") -> "AllocatedBit":
        """(NOT a) AND (NOT b)"""
        value = None if a.value is None or b.value is None else not a.value and not b.value
        result = cs.alloc("nor result", _int(value))
        # (1 - a) * (1 - b) = c
        cs.enforce(
            "nor constraint",
            cs.ONE - a.variable,
            cs.ONE - b.variable,
            LinearCombination({result: 1}),
        )
        return cls(result, value)


@dataclass(frozen=True, slots=True)
class Boolean:
    bit: Optional[AllocatedBit] = None
    negated: bool = False
    constant_value: bool = False

    @classmethod
    def constant(cls, value: bool) -> "Boolean":
        return cls(constant_value=bool(value))

    @classmethod
    def from_bit(cls, bit: AllocatedBit) -> "Boolean":
        return cls(bit=bit)

    @property
    def is_constant(self) -> bool:
        return self.bit is None

    def get_value(self) -> Optional[bool]:
        if self.bit is None:
            return self.constant_value
        if self.bit.value is None:
            return None
        return self.bit.value != self.negated

    def not_(self) -> "Boolean":
        if self.bit is None:
            return Boolean.constant(not self.constant_value)
        return Boolean(bit=self.bit, negated=not self.negated)

    def lc(self, one: Variable, coeff: int) -> LinearCombination:
        if self.bit is None:
            return LinearCombination({one: coeff}) if self.constant_value else LinearCombination()
        if self.negated:
            return LinearCombination({one: coeff, self.bit.variable: -coeff})
        return LinearCombination({self.bit.variable: coeff})

    @staticmethod
    def xor(cs: ConstraintSystem, a: "Boolean", b: "Boolean") -> "Boolean":
        if a.bit is None:
            return b.not_() if a.constant_value else b
        if b.bit is None:
            return a.not_() if b.constant_value else a
        # a XOR (NOT b) = NOT (a XOR b)
        result = AllocatedBit.xor(cs, a.bit, b.bit)
        return Boolean(bit=result, negated=a.negated != b.negated)

    @staticmethod
    def and_(cs: ConstraintSystem, a: "Boolean", b: "Boolean") -> "Boolean":
        if a.bit is None:
            return b if a.constant_value else Boolean.constant(False)
        if b.bit is None:
            return a if b.constant_value else Boolean.constant(False)
        if a.negated and b.negated:
            return Boolean.from_bit(AllocatedBit.nor(cs, a.bit, b.bit))
        if a.negated:
            return Boolean.from_bit(AllocatedBit.and_not(cs, b.bit, a.bit))
        if b.negated:
            return Boolean.from_bit(AllocatedBit.and_not(cs, a.bit, b.bit))
        return Boolean.from_bit(AllocatedBit.and_(cs, a.bit, b.bit))

    @staticmethod
    def sha256_ch(cs: ConstraintSystem, a: "Boolean", b: "Boolean", c: "Boolean") -> "Boolean":
        """(a AND b) XOR ((NOT a) AND c)"""
        va, vb, vc = a.get_value(), b.get_value(), c.get_value()
        value = None if va is None or vb is None or vc is None else (vb if va else vc)
        if a.is_constant and b.is_constant and c.is_constant:
            return Boolean.constant(value)
        ch = cs.alloc("ch", _int(value))
        # a * (b - c) = ch - c
        cs.enforce(
            "ch computation",
            a.lc(cs.ONE, 1),
            b.lc(cs.ONE, 1) - c.lc(cs.ONE, 1),
            LinearCombination({ch: 1}) - c.lc(cs.ONE, 1),
        )
        return Boolean.from_bit(AllocatedBit(ch, value))

    @staticmethod
    def sha256_maj(cs: ConstraintSystem, a: "Boolean", b: "Boolean", c: "Boolean") -> "Boolean":
        """(a AND b) XOR (a AND c) XOR (b AND c)"""
        va, vb, vc = a.get_value(), b.get_value(), c.get_value()
        value = None if va is None or vb is None or vc is None else (int(va) + int(vb) + int(vc)) >= 2
        if a.is_constant and b.is_constant and c.is_constant:
            return Boolean.constant(value)
        with cs.namespace("b and c"):
            bc = Boolean.and_(cs, b, c)
        maj = cs.alloc("maj", _int(value))
        # a * (b + c - 2bc) = maj - bc
        cs.enforce(
            "maj computation",
            a.lc(cs.ONE, 1),
            b.lc(cs.ONE, 1) + c.lc(cs.ONE, 1) - bc.lc(cs.ONE, 2),
            LinearCombination({maj: 1}) - bc.lc(cs.ONE, 1),
        )
        return Boolean.from_bit(AllocatedBit(maj, value))
