from dataclasses import dataclass
from typing import Optional

import pytest

from preimage_proof.boolean import AllocatedBit, Boolean
from preimage_proof.curves import get_curve
from preimage_proof.errors import (
    AssignmentMissingError,
    MalformedProofError,
    MalformedVerifyingKeyError,
    PublicInputError,
)
from preimage_proof.groth16 import (
    Parameters,
    Proof,
    VerifyingKey,
    compile_circuit,
    create_proof,
    generate_parameters,
    prepare_verifying_key,
    verify_proof,
)
from preimage_proof.hashing import double_sha256
from preimage_proof.multipack import compute_multipacking, pack_into_inputs
from preimage_proof.pipeline import DEMO_PREIMAGE, run_pipeline
from preimage_proof.uint32 import UInt32


def _mix(x: int) -> int:
    rotated = ((x >> 7) | (x << 25)) & 0xFFFFFFFF
    return ((x ^ rotated) + x + 0x9E3779B9) & 0xFFFFFFFF


@dataclass
class MixCircuit:
    """Knowledge of a 32-bit x whose mix(x) is public, built from the SHA-256 gadgets."""

    x: Optional[int] = None

    def synthesize(self, cs):
        bits = []
        for i in range(32):
            value = None if self.x is None else (self.x >> i) & 1 == 1
            with cs.namespace(f"x bit {i}"):
                bits.append(Boolean.from_bit(AllocatedBit.alloc(cs, value)))
        x = UInt32.from_bits(bits)
        with cs.namespace("xor"):
            mixed = x.xor(cs, x.rotr(7))
        with cs.namespace("add"):
            out = UInt32.addmany(cs, [mixed, x, UInt32.constant(0x9E3779B9)])
        with cs.namespace("pack"):
            pack_into_inputs(cs, out.bits)


def _public_inputs(x, curve):
    out = _mix(x)
    return compute_multipacking([(out >> i) & 1 == 1 for i in range(32)], curve.capacity)


@pytest.fixture(scope="module")
def bn128_setup():
    compiled = compile_circuit(MixCircuit(), get_curve("bn128"))
    params = generate_parameters(compiled)
    return compiled, params, prepare_verifying_key(params.vk, compiled)


def test_small_circuit_end_to_end(bn128_setup):
    compiled, params, pvk = bn128_setup
    x = 0xC0FFEE11
    proof = create_proof(compiled, MixCircuit(x), params)

    assert params.vk.num_public_inputs == 1
    assert verify_proof(pvk, proof, _public_inputs(x, compiled.curve))


def test_one_bit_flip_in_public_input_fails(bn128_setup):
    compiled, params, pvk = bn128_setup
    x = 12345
    proof = create_proof(compiled, MixCircuit(x), params)
    inputs = _public_inputs(x, compiled.curve)

    assert not verify_proof(pvk, proof, [inputs[0] ^ 1])
    assert not verify_proof(pvk, proof, _public_inputs(x + 1, compiled.curve))


def test_wrong_input_count_is_rejected(bn128_setup):
    compiled, params, pvk = bn128_setup
    proof = create_proof(compiled, MixCircuit(1), params)
    with pytest.raises(MalformedVerifyingKeyError):
        verify_proof(pvk, proof, [])
    with pytest.raises(MalformedVerifyingKeyError):
        verify_proof(pvk, proof, [1, 2])


def test_out_of_range_inputs_are_rejected_not_reduced(bn128_setup):
    compiled, params, pvk = bn128_setup
    x = 99
    proof = create_proof(compiled, MixCircuit(x), params)
    (value,) = _public_inputs(x, compiled.curve)

    assert verify_proof(pvk, proof, [value])
    for bad in (value + compiled.curve.order, -1, compiled.curve.order, True, "1"):
        with pytest.raises(PublicInputError):
            verify_proof(pvk, proof, [bad])


def test_proving_without_witness_fails(bn128_setup):
    compiled, params, _ = bn128_setup
    with pytest.raises(AssignmentMissingError):
        create_proof(compiled, MixCircuit(), params)


def test_proving_other_circuit_is_rejected(bn128_setup):
    compiled, params, _ = bn128_setup

    @dataclass
    class Bigger:
        x: int

        def synthesize(self, cs):
            MixCircuit(self.x).synthesize(cs)
            with cs.namespace("extra"):
                AllocatedBit.alloc(cs, True)

    with pytest.raises(MalformedVerifyingKeyError):
        create_proof(compiled, Bigger(3), params)


def test_keys_and_proof_survive_json(bn128_setup):
    compiled, params, _ = bn128_setup
    x = 0xABCDEF
    restored = Parameters.from_dict(params.to_dict())
    proof = create_proof(compiled, MixCircuit(x), restored)

    pvk = prepare_verifying_key(VerifyingKey.from_dict(params.vk.to_dict()), compiled)
    assert verify_proof(pvk, Proof.from_dict(proof.to_dict()), _public_inputs(x, compiled.curve))


@pytest.mark.parametrize(
    "raw",
    [
        {"curve": "bn128", "proof": "zz"},
        {"curve": "bn128"},
        {"curve": "bn128", "proof": 5},
        {"curve": "secp256k1", "proof": ""},
        {"proof": ""},
    ],
)
def test_undecodable_proofs_raise_malformed_proof(raw):
    with pytest.raises(MalformedProofError):
        Proof.from_dict(raw)


def test_corrupted_proof_bytes_never_verify(bn128_setup):
    compiled, params, pvk = bn128_setup
    x = 4242
    raw = create_proof(compiled, MixCircuit(x), params).to_dict()
    data = bytearray.fromhex(raw["proof"])
    data[len(data) // 2] ^= 0x01
    raw["proof"] = data.hex()

    try:
        forged = Proof.from_dict(raw)
    except MalformedProofError:
        return
    assert not verify_proof(pvk, forged, _public_inputs(x, compiled.curve))


def test_small_circuit_on_bls12_381(bn128_setup):
    compiled = compile_circuit(MixCircuit(), get_curve("bls12_381"))
    params = generate_parameters(compiled)
    pvk = prepare_verifying_key(params.vk, compiled)
    proof = create_proof(compiled, MixCircuit(0xFFFFFFFF), params)

    assert verify_proof(pvk, proof, _public_inputs(0xFFFFFFFF, compiled.curve))

    bn_compiled, bn_params, _ = bn128_setup
    with pytest.raises(MalformedVerifyingKeyError):
        prepare_verifying_key(bn_params.vk, compiled)
    bn_proof = create_proof(bn_compiled, MixCircuit(1), bn_params)
    with pytest.raises(MalformedVerifyingKeyError):
        verify_proof(pvk, bn_proof, [0])


def test_preimage_proof_end_to_end():
    curve = get_curve("bn128")
    outcome = run_pipeline(DEMO_PREIMAGE, curve=curve)
    assert outcome.digest == double_sha256(DEMO_PREIMAGE)
    assert len(outcome.public_inputs) == 2
    assert outcome.verified
