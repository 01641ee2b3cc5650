"""Groth16 over the constraint systems built by the gadgets, using zksnake.

A circuit is synthesized once with every witness value unknown and exported
as circom ``.r1cs``/``.sym`` files, which zksnake loads and compiles. Keys
and proofs are zksnake objects wrapped with the curve and circuit shape they
belong to so that JSON artifacts cannot be mixed across circuits.
"""

from __future__ import annotations

import logging
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

from zksnake.arithmetization.r1cs import R1CS
from zksnake.groth16 import Groth16
from zksnake.groth16 import Proof as Groth16Proof
from zksnake.groth16 import ProvingKey as Groth16ProvingKey
from zksnake.groth16 import VerifyingKey as Groth16VerifyingKey

from .constraint_system import Circuit, RecordingConstraintSystem
from .curves import Curve, get_curve
from .errors import AssignmentMissingError, MalformedProofError, MalformedVerifyingKeyError, PublicInputError
from .r1cs_file import wire_assignment, write_circuit_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CircuitShape:
    num_inputs: int
    num_aux: int
    num_constraints: int

    @classmethod
    def of(cls, cs: RecordingConstraintSystem) -> "CircuitShape":
        return cls(cs.num_inputs, cs.num_aux, cs.num_constraints)

    def to_dict(self) -> Dict[str, int]:
        return {"num_inputs": self.num_inputs, "num_aux": self.num_aux, "num_constraints": self.num_constraints}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CircuitShape":
        return cls(int(raw["num_inputs"]), int(raw["num_aux"]), int(raw["num_constraints"]))


@dataclass
class CompiledCircuit:
    curve: Curve
    shape: CircuitShape
    r1cs: R1CS
    # recorded with unknown values; used to rebuild public witnesses
    template: RecordingConstraintSystem


def synthesize(circuit: Circuit, curve: Curve) -> RecordingConstraintSystem:
    cs = RecordingConstraintSystem(curve.order)
    circuit.synthesize(cs)
    return cs


def compile_circuit(circuit: Circuit, curve: Curve) -> CompiledCircuit:
    started = time.perf_counter()
    cs = synthesize(circuit, curve)
    shape = CircuitShape.of(cs)
    with tempfile.TemporaryDirectory(prefix="preimage-proof-") as tmp:
        r1cs_path, sym_path = write_circuit_files(cs, Path(tmp))
        r1cs = R1CS.from_file(str(r1cs_path), str(sym_path))
    r1cs.compile()
    logger.info(
        "compiled %d constraints (%d inputs, %d aux) on %s in %.1fs",
        shape.num_constraints,
        shape.num_inputs,
        shape.num_aux,
        curve.name,
        time.perf_counter() - started,
    )
    return CompiledCircuit(curve=curve, shape=shape, r1cs=r1cs, template=cs)


@dataclass
class VerifyingKey:
    curve: Curve
    shape: CircuitShape
    inner: Groth16VerifyingKey

    @property
    def num_public_inputs(self) -> int:
        return self.shape.num_inputs - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "curve": self.curve.name,
            "shape": self.shape.to_dict(),
            "key": self.inner.to_bytes().hex(),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "VerifyingKey":
        curve = get_curve(raw["curve"])
        inner = Groth16VerifyingKey.from_bytes(bytes.fromhex(raw["key"]), curve.backend_name)
        return cls(curve=curve, shape=CircuitShape.from_dict(raw["shape"]), inner=inner)


@dataclass
class Parameters:
    vk: VerifyingKey
    inner: Groth16ProvingKey

    @property
    def curve(self) -> Curve:
        return self.vk.curve

    def to_dict(self) -> Dict[str, Any]:
        return {"vk": self.vk.to_dict(), "key": self.inner.to_bytes().hex()}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Parameters":
        vk = VerifyingKey.from_dict(raw["vk"])
        inner = Groth16ProvingKey.from_bytes(bytes.fromhex(raw["key"]), vk.curve.backend_name)
        return cls(vk=vk, inner=inner)


def _check_matches(compiled: CompiledCircuit, curve: Curve, shape: CircuitShape) -> None:
    if curve.name != compiled.curve.name:
        raise MalformedVerifyingKeyError(f"Key is for {curve.name}, circuit is compiled on {compiled.curve.name}")
    if shape != compiled.shape:
        raise MalformedVerifyingKeyError(f"Key was generated for {shape}, circuit has {compiled.shape}")


def generate_parameters(compiled: CompiledCircuit) -> Parameters:
    started = time.perf_counter()
    groth16 = Groth16(compiled.r1cs, compiled.curve.backend_name)
    groth16.setup()
    logger.info("generated parameters in %.1fs", time.perf_counter() - started)
    vk = VerifyingKey(curve=compiled.curve, shape=compiled.shape, inner=groth16.verifying_key)
    return Parameters(vk=vk, inner=groth16.proving_key)


@dataclass
class PreparedVerifyingKey:
    vk: VerifyingKey
    compiled: CompiledCircuit
    groth16: Groth16

    @property
    def curve(self) -> Curve:
        return self.vk.curve


def prepare_verifying_key(vk: VerifyingKey, compiled: CompiledCircuit) -> PreparedVerifyingKey:
    _check_matches(compiled, vk.curve, vk.shape)
    groth16 = Groth16(compiled.r1cs, vk.curve.backend_name)
    groth16.verifying_key = vk.inner
    return PreparedVerifyingKey(vk=vk, compiled=compiled, groth16=groth16)


@dataclass
class Proof:
    curve: Curve
    inner: Groth16Proof

    def to_dict(self) -> Dict[str, Any]:
        return {"curve": self.curve.name, "proof": self.inner.to_bytes().hex()}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Proof":
        """Decode a proof, raising ``MalformedProofError`` for anything zksnake rejects."""
        try:
            curve = get_curve(raw["curve"])
            data = bytes.fromhex(raw["proof"])
            inner = Groth16Proof.from_bytes(data, curve.backend_name)
        except (KeyError, TypeError, ValueError, IndexError, AttributeError) as exc:
            raise MalformedProofError(f"Cannot decode proof: {exc}") from exc
        return cls(curve=curve, inner=inner)


def create_proof(compiled: CompiledCircuit, circuit: Circuit, params: Parameters) -> Proof:
    _check_matches(compiled, params.curve, params.vk.shape)
    started = time.perf_counter()
    cs = synthesize(circuit, compiled.curve)
    missing = cs.first_unassigned()
    if missing is not None:
        raise AssignmentMissingError(f"No value for {missing}")
    if CircuitShape.of(cs) != compiled.shape:
        raise MalformedVerifyingKeyError(f"Witness synthesized {CircuitShape.of(cs)}, expected {compiled.shape}")
    pub, priv = compiled.r1cs.generate_witness(wire_assignment(cs))
    logger.info("synthesized witness in %.1fs", time.perf_counter() - started)

    started = time.perf_counter()
    groth16 = Groth16(compiled.r1cs, params.curve.backend_name)
    groth16.proving_key = params.inner
    inner = groth16.prove(pub, priv)
    logger.info("created proof in %.1fs", time.perf_counter() - started)
    return Proof(curve=params.curve, inner=inner)


def _check_inputs(curve: Curve, inputs: Sequence[int]) -> List[int]:
    checked = []
    for i, value in enumerate(inputs):
        if isinstance(value, bool) or not isinstance(value, int):
            raise PublicInputError(f"Public input {i} is not an integer: {value!r}")
        if not 0 <= value < curve.order:
            raise PublicInputError(f"Public input {i} is outside the {curve.name} scalar field")
        checked.append(value)
    return checked


def verify_proof(pvk: PreparedVerifyingKey, proof: Proof, inputs: Sequence[int]) -> bool:
    """Check ``proof`` against public ``inputs`` (``ONE`` excluded).

    Raises ``MalformedVerifyingKeyError`` when the proof's curve or the number
    of inputs does not match the key and ``PublicInputError`` for inputs that
    are not canonical scalars.
    """
    if proof.curve.name != pvk.curve.name:
        raise MalformedVerifyingKeyError(f"Proof is for {proof.curve.name}, key is for {pvk.curve.name}")
    if len(inputs) != pvk.vk.num_public_inputs:
        raise MalformedVerifyingKeyError(
            f"Expected {pvk.vk.num_public_inputs} public inputs; received {len(inputs)}"
        )
    checked = _check_inputs(pvk.curve, inputs)
    pub, _ = pvk.compiled.r1cs.generate_witness(wire_assignment(pvk.compiled.template, checked))
    return bool(pvk.groth16.verify(proof.inner, pub))
