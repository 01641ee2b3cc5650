"""Pairing-friendly curves the prover can run on.

Scalar-field orders come from py_ecc; ``backend_name`` is the name zksnake
uses for the same curve.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import py_ecc.optimized_bls12_381 as bls12_381
import py_ecc.optimized_bn128 as bn128


@dataclass(frozen=True, slots=True)
class Curve:
    name: str
    backend_name: str
    order: int

    @property
    def capacity(self) -> int:
        """Bits that pack into one scalar without wrapping."""
        return self.order.bit_length() - 1


CURVES: Dict[str, Curve] = {
    "bls12_381": Curve("bls12_381", "BLS12_381", bls12_381.curve_order),
    "bn128": Curve("bn128", "BN254", bn128.curve_order),
}


def get_curve(name: str) -> Curve:
    try:
        return CURVES[name.lower()]
    except KeyError:
        raise ValueError(f"Unsupported curve: {name}. Choose one of {sorted(CURVES)}") from None
