from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .circuit import PreimageCircuit
from .config import GlobalConfig
from .constraint_system import RecordingConstraintSystem
from .curves import get_curve
from .errors import PreimageLengthError
from .hashing import double_sha256
from .multipack import pack_digest
from .provider import ProviderRuntime, run_setup
from .prover import ProverService
from .verifier import VerifierService

app = typer.Typer(help="Zero-knowledge proofs of knowing an 80-byte double SHA-256 preimage.")


def _load_config(config: Optional[Path]) -> GlobalConfig:
    if config is None:
        return GlobalConfig()
    return GlobalConfig.load(config)


def _read_preimage(preimage_hex: Optional[str], preimage_file: Optional[Path]) -> bytes:
    if preimage_hex:
        try:
            return bytes.fromhex(preimage_hex.removeprefix("0x"))
        except ValueError as exc:
            raise typer.BadParameter(f"--preimage-hex is not valid hex: {exc}") from exc
    if preimage_file:
        return preimage_file.read_bytes()
    raise typer.BadParameter("Pass --preimage-hex or --preimage-file.")


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log setup and proving progress."),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@app.command()
def setup(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config JSON; defaults apply when omitted."),
) -> None:
    """Generate proving parameters and verifying key from the circuit shape."""
    cfg = _load_config(config)
    artifacts = run_setup(cfg)
    typer.echo(f"Proving parameters: {artifacts.params_path}")
    typer.echo(f"Verifying key: {artifacts.verifying_key_path}")
    typer.echo(f"Public inputs per proof: {artifacts.num_public_inputs}")


@app.command()
def prove(
    output_dir: Path = typer.Option(..., "--output-dir", "-o", help="Where to write proof.json and public_inputs.json."),
    preimage_hex: Optional[str] = typer.Option(None, "--preimage-hex", help="The 80-byte secret as hex."),
    preimage_file: Optional[Path] = typer.Option(None, "--preimage-file", help="File holding the 80-byte secret."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config JSON."),
) -> None:
    """Prove knowledge of the preimage of its double SHA-256 digest."""
    preimage = _read_preimage(preimage_hex, preimage_file)
    runtime = ProviderRuntime(_load_config(config))
    try:
        outputs = ProverService(runtime).generate(preimage, output_dir)
    except PreimageLengthError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"Digest: {outputs.digest.hex()}")
    typer.echo(f"Proof: {outputs.proof_path}")
    typer.echo(f"Public inputs: {outputs.public_inputs_path}")


@app.command()
def verify(
    proof: Path = typer.Option(..., "--proof", "-p", help="proof.json written by the prove command."),
    digest_hex: str = typer.Option(..., "--digest", "-d", help="Claimed double SHA-256 digest as hex."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config JSON."),
) -> None:
    """Verify a proof against a claimed digest."""
    runtime = ProviderRuntime(_load_config(config))
    result = VerifierService(runtime).verify(proof, digest_hex)
    typer.echo(f"Verification status: {result.reason}")
    if not result.is_valid:
        raise typer.Exit(code=1)


@app.command()
def check(
    preimage_hex: Optional[str] = typer.Option(None, "--preimage-hex", help="The 80-byte secret as hex."),
    preimage_file: Optional[Path] = typer.Option(None, "--preimage-file", help="File holding the 80-byte secret."),
    curve: str = typer.Option("bls12_381", "--curve", help="Scalar field used for packing."),
) -> None:
    """Synthesize the circuit for a preimage and report whether it is satisfied."""
    preimage = _read_preimage(preimage_hex, preimage_file)
    try:
        circuit = PreimageCircuit(preimage)
    except PreimageLengthError as exc:
        raise typer.BadParameter(str(exc)) from exc
    selected = get_curve(curve)
    cs = RecordingConstraintSystem(selected.order)
    circuit.synthesize(cs)
    expected = pack_digest(double_sha256(preimage), selected.capacity)
    typer.echo(f"Constraints: {cs.num_constraints}")
    typer.echo(f"Variables: {cs.num_inputs} inputs, {cs.num_aux} aux")
    unsatisfied = cs.which_is_unsatisfied()
    typer.echo(f"Satisfied: {unsatisfied is None}" + (f" (first failure: {unsatisfied})" if unsatisfied else ""))
    typer.echo(f"Public inputs match digest: {cs.input_values() == expected}")
    if unsatisfied is not None or cs.input_values() != expected:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
