from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import MalformedProofError
from .groth16 import Proof, verify_proof
from .multipack import pack_digest
from .provider import ProviderRuntime
from .utils import load_json

logger = logging.getLogger(__name__)

DIGEST_LENGTH = 32


@dataclass
class VerificationResult:
    is_valid: bool
    reason: str
    digest_hex: str
    proof_ok: bool


class VerifierService:
    def __init__(self, runtime: ProviderRuntime):
        self.runtime = runtime

    def _reject(self, reason: str, digest_hex: str) -> VerificationResult:
        logger.info("rejecting proof: %s", reason)
        return VerificationResult(is_valid=False, reason=reason, digest_hex=digest_hex, proof_ok=False)

    def verify(self, proof_path: Path, digest_hex: str) -> VerificationResult:
        """Check a proof against a claimed double SHA-256 digest (standard byte order)."""
        digest_hex = digest_hex.lower().removeprefix("0x")
        try:
            digest = bytes.fromhex(digest_hex)
        except ValueError:
            return self._reject("malformed-digest", digest_hex)
        if len(digest) != DIGEST_LENGTH:
            return self._reject("malformed-digest", digest_hex)
        if not proof_path.exists():
            return self._reject("missing-proof", digest_hex)

        raw = load_json(proof_path)
        if not isinstance(raw, dict):
            return self._reject("malformed-proof", digest_hex)
        if raw.get("curve") != self.runtime.curve.name:
            return self._reject("curve-mismatch", digest_hex)
        try:
            proof = Proof.from_dict(raw)
        except MalformedProofError:
            return self._reject("malformed-proof", digest_hex)

        pvk = self.runtime.verifying_key
        public_inputs = pack_digest(digest, pvk.curve.capacity)
        proof_ok = verify_proof(pvk, proof, public_inputs)
        return VerificationResult(
            is_valid=proof_ok,
            reason="ok" if proof_ok else "proof-failed",
            digest_hex=digest_hex,
            proof_ok=proof_ok,
        )
