"""Parameter generation and the runtime state shared by prover and verifier."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .circuit import PreimageCircuit
from .config import GlobalConfig
from .curves import Curve, get_curve
from .groth16 import (
    CompiledCircuit,
    Parameters,
    PreparedVerifyingKey,
    VerifyingKey,
    compile_circuit,
    generate_parameters,
    prepare_verifying_key,
)
from .utils import dump_json, load_json

logger = logging.getLogger(__name__)


@dataclass
class SetupArtifacts:
    params_path: Path
    verifying_key_path: Path
    num_public_inputs: int


def run_setup(config: GlobalConfig) -> SetupArtifacts:
    """Generate proving parameters from the preimage circuit's shape alone."""
    curve = get_curve(config.zk.curve)
    logger.info("generating parameters on %s", curve.name)
    params = generate_parameters(compile_circuit(PreimageCircuit(), curve))
    dump_json(config.artifacts.params_path, params.to_dict())
    dump_json(config.artifacts.verifying_key_path, params.vk.to_dict())
    return SetupArtifacts(
        params_path=config.artifacts.params_path,
        verifying_key_path=config.artifacts.verifying_key_path,
        num_public_inputs=params.vk.num_public_inputs,
    )


class ProviderRuntime:
    def __init__(self, config: GlobalConfig):
        self.config = config
        self.curve: Curve = get_curve(config.zk.curve)
        self._compiled: CompiledCircuit | None = None
        self._params: Parameters | None = None
        self._pvk: PreparedVerifyingKey | None = None

    @property
    def compiled(self) -> CompiledCircuit:
        if self._compiled is None:
            self._compiled = compile_circuit(PreimageCircuit(), self.curve)
        return self._compiled

    @property
    def params(self) -> Parameters:
        if self._params is None:
            path = self.config.artifacts.params_path
            if not path.exists():
                raise FileNotFoundError(f"Proving parameters not found: {path}. Run setup first.")
            self._params = Parameters.from_dict(load_json(path))
        return self._params

    @property
    def verifying_key(self) -> PreparedVerifyingKey:
        if self._pvk is None:
            path = self.config.artifacts.verifying_key_path
            if not path.exists():
                raise FileNotFoundError(f"Verifying key not found: {path}. Run setup first.")
            self._pvk = prepare_verifying_key(VerifyingKey.from_dict(load_json(path)), self.compiled)
        return self._pvk
