"""Circom-format ``.r1cs`` and ``.sym`` files for a recorded constraint system.

Wire 0 is the constant one, wires ``1..n`` are the public inputs in
allocation order, and the auxiliary variables follow. Public inputs are
declared as public outputs of the ``main`` component, which is how circom
marks every public signal of a circuit without inputs of its own.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .constraint_system import LinearCombination, RecordingConstraintSystem, Variable

R1CS_MAGIC = b"r1cs"
R1CS_VERSION = 1
HEADER_SECTION = 1
CONSTRAINT_SECTION = 2
WIRE_LABEL_SECTION = 3


def field_size(modulus: int) -> int:
    """Bytes per field element, rounded up to whole 64-bit limbs."""
    return (modulus.bit_length() + 63) // 64 * 8


def wire_index(cs: RecordingConstraintSystem, var: Variable) -> int:
    return var.index if var.is_input else cs.num_inputs + var.index


def wire_name(wire: int) -> str:
    return f"main.w{wire}"


def _encode_lc(cs: RecordingConstraintSystem, lc: LinearCombination, size: int) -> bytes:
    terms: Dict[int, int] = {}
    for var, coeff in lc:
        wire = wire_index(cs, var)
        terms[wire] = (terms.get(wire, 0) + coeff) % cs.modulus
    nonzero = sorted((wire, coeff) for wire, coeff in terms.items() if coeff)
    out = bytearray(struct.pack("<I", len(nonzero)))
    for wire, coeff in nonzero:
        out += struct.pack("<I", wire)
        out += coeff.to_bytes(size, "little")
    return bytes(out)


def _section(kind: int, body: bytes) -> bytes:
    return struct.pack("<IQ", kind, len(body)) + body


def encode_r1cs(cs: RecordingConstraintSystem) -> bytes:
    size = field_size(cs.modulus)
    num_wires = cs.num_inputs + cs.num_aux

    header = struct.pack("<I", size) + cs.modulus.to_bytes(size, "little")
    # wires, public outputs, public inputs, private inputs, labels, constraints
    header += struct.pack("<IIIIQI", num_wires, cs.num_inputs - 1, 0, 0, num_wires, cs.num_constraints)

    constraints = bytearray()
    for a, b, c in cs.constraints():
        constraints += _encode_lc(cs, a, size)
        constraints += _encode_lc(cs, b, size)
        constraints += _encode_lc(cs, c, size)

    labels = b"".join(struct.pack("<Q", wire) for wire in range(num_wires))

    return (
        R1CS_MAGIC
        + struct.pack("<II", R1CS_VERSION, 3)
        + _section(HEADER_SECTION, header)
        + _section(CONSTRAINT_SECTION, bytes(constraints))
        + _section(WIRE_LABEL_SECTION, labels)
    )


def encode_sym(cs: RecordingConstraintSystem) -> str:
    # label, wire, component, name
    lines = [f"{wire},{wire},0,{wire_name(wire)}" for wire in range(1, cs.num_inputs + cs.num_aux)]
    return "\n".join(lines) + "\n"


def write_circuit_files(cs: RecordingConstraintSystem, directory: Path, stem: str = "circuit") -> Tuple[Path, Path]:
    directory.mkdir(parents=True, exist_ok=True)
    r1cs_path = directory / f"{stem}.r1cs"
    sym_path = directory / f"{stem}.sym"
    r1cs_path.write_bytes(encode_r1cs(cs))
    sym_path.write_text(encode_sym(cs), encoding="utf-8")
    return r1cs_path, sym_path


def wire_assignment(
    cs: RecordingConstraintSystem,
    public_inputs: Optional[List[int]] = None,
) -> Dict[str, int]:
    """Values keyed by wire name.

    With ``public_inputs`` given, the public wires take those values and every
    auxiliary wire is zero; that is all a verifier knows about a witness.
    """
    if public_inputs is None:
        inputs = cs.input_values()
        aux = cs.aux_values()
    else:
        inputs = list(public_inputs)
        aux = [0] * cs.num_aux
    values = [*inputs, *aux]
    if any(value is None for value in values):
        raise ValueError("Every wire needs a value")
    return {wire_name(wire): value for wire, value in enumerate(values, start=1)}
