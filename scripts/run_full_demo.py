#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging

from preimage_proof.curves import get_curve
from preimage_proof.pipeline import DEMO_PREIMAGE, run_pipeline


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run setup, prover, and verifier in memory for one preimage.")
    parser.add_argument("--preimage-hex", type=str, default=None, help="80-byte preimage as hex; defaults to 0x2a * 80.")
    parser.add_argument("--curve", type=str, default="bls12_381", help="bls12_381 or bn128.")
    parser.add_argument("--verbose", action="store_true", help="Log progress of each stage.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    preimage = bytes.fromhex(args.preimage_hex) if args.preimage_hex else DEMO_PREIMAGE
    print(f"[demo] Running setup on {args.curve}; compiling the circuit first.")
    outcome = run_pipeline(preimage, curve=get_curve(args.curve))
    print(f"[demo] Digest: {outcome.digest.hex()}")
    print(f"[demo] Public inputs: {[hex(value) for value in outcome.public_inputs]}")
    print(f"[demo] Verification status: {'ok' if outcome.verified else 'proof-failed'}")
    if not outcome.verified:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
