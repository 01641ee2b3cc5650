from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .circuit import PreimageCircuit
from .groth16 import create_proof
from .hashing import double_sha256
from .multipack import pack_digest
from .provider import ProviderRuntime
from .utils import dump_json

logger = logging.getLogger(__name__)


@dataclass
class ProverOutputs:
    proof_path: Path
    public_inputs_path: Path
    digest: bytes
    public_inputs: List[int]


class ProverService:
    def __init__(self, runtime: ProviderRuntime):
        self.runtime = runtime

    def generate(self, preimage: bytes, output_dir: Path) -> ProverOutputs:
        # rejects wrong lengths before any synthesis work
        circuit = PreimageCircuit(preimage)
        digest = double_sha256(preimage)
        params = self.runtime.params
        logger.info("proving knowledge of a preimage of %s", digest.hex())
        proof = create_proof(self.runtime.compiled, circuit, params)
        public_inputs = pack_digest(digest, params.curve.capacity)

        output_dir.mkdir(parents=True, exist_ok=True)
        proof_path = output_dir / "proof.json"
        public_inputs_path = output_dir / "public_inputs.json"
        dump_json(proof_path, proof.to_dict())
        dump_json(
            public_inputs_path,
            {
                "curve": params.curve.name,
                "digest_hex": digest.hex(),
                "inputs": [hex(value) for value in public_inputs],
            },
        )
        return ProverOutputs(
            proof_path=proof_path,
            public_inputs_path=public_inputs_path,
            digest=digest,
            public_inputs=public_inputs,
        )
