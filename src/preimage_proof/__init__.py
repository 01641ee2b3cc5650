"""Groth16 proofs of knowing an 80-byte double SHA-256 preimage."""

from .circuit import PREIMAGE_LENGTH, PreimageCircuit
from .config import ArtifactConfig, GlobalConfig, ZKConfig
from .constraint_system import ConstraintSystem, LinearCombination, RecordingConstraintSystem, Variable
from .curves import CURVES, Curve, get_curve
from .errors import MalformedProofError, PreimageLengthError, PublicInputError, SynthesisError
from .groth16 import (
    CompiledCircuit,
    Parameters,
    PreparedVerifyingKey,
    Proof,
    VerifyingKey,
    compile_circuit,
    create_proof,
    generate_parameters,
    prepare_verifying_key,
    verify_proof,
)
from .hashing import double_sha256
from .multipack import compute_multipacking, pack_digest
from .pipeline import PipelineOutcome, run_pipeline
from .provider import ProviderRuntime, SetupArtifacts, run_setup
from .prover import ProverOutputs, ProverService
from .verifier import VerificationResult, VerifierService

__all__ = [
    "PREIMAGE_LENGTH",
    "PreimageCircuit",
    "ArtifactConfig",
    "GlobalConfig",
    "ZKConfig",
    "ConstraintSystem",
    "LinearCombination",
    "RecordingConstraintSystem",
    "Variable",
    "CURVES",
    "Curve",
    "get_curve",
    "MalformedProofError",
    "PreimageLengthError",
    "PublicInputError",
    "SynthesisError",
    "Parameters",
    "PreparedVerifyingKey",
    "Proof",
    "VerifyingKey",
    "CompiledCircuit",
    "compile_circuit",
    "create_proof",
    "generate_parameters",
    "prepare_verifying_key",
    "verify_proof",
    "double_sha256",
    "compute_multipacking",
    "pack_digest",
    "PipelineOutcome",
    "run_pipeline",
    "ProviderRuntime",
    "SetupArtifacts",
    "run_setup",
    "ProverOutputs",
    "ProverService",
    "VerificationResult",
    "VerifierService",
]
