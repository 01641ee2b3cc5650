"""In-memory setup, prove and verify run for one preimage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .circuit import PreimageCircuit
from .curves import Curve, get_curve
from .groth16 import Proof, compile_circuit, create_proof, generate_parameters, prepare_verifying_key, verify_proof
from .hashing import double_sha256
from .multipack import pack_digest

logger = logging.getLogger(__name__)

DEMO_PREIMAGE = bytes([42]) * 80


@dataclass
class PipelineOutcome:
    digest: bytes
    public_inputs: List[int]
    proof: Proof
    verified: bool


def run_pipeline(preimage: bytes = DEMO_PREIMAGE, curve: Curve | None = None) -> PipelineOutcome:
    curve = curve or get_curve("bls12_381")
    # fail on a bad preimage before spending time on setup
    circuit = PreimageCircuit(preimage)

    compiled = compile_circuit(PreimageCircuit(), curve)
    params = generate_parameters(compiled)
    pvk = prepare_verifying_key(params.vk, compiled)

    # the verifier's public input comes from a plain hash, never from the circuit
    digest = double_sha256(preimage)
    proof = create_proof(compiled, circuit, params)

    public_inputs = pack_digest(digest, curve.capacity)
    verified = verify_proof(pvk, proof, public_inputs)
    logger.info("proof for %s verified: %s", digest.hex(), verified)
    return PipelineOutcome(digest=digest, public_inputs=public_inputs, proof=proof, verified=verified)
