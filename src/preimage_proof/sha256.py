"""SHA-256 as boolean constraints.

Input and output bits are big-endian within each byte, i.e. the bit string a
standard SHA-256 implementation reads.
"""

from __future__ import annotations

from typing import List, Sequence

from .boolean import Boolean
from .constraint_system import ConstraintSystem
from .uint32 import UInt32

ROUND_CONSTANTS = [
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5, 0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3, 0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC, 0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7, 0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13, 0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3, 0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5, 0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208, 0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
]

IV = [0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A, 0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19]


def get_sha256_iv() -> List[UInt32]:
    return [UInt32.constant(word) for word in IV]


def _xor3(cs: ConstraintSystem, name: str, a: UInt32, b: UInt32, c: UInt32) -> UInt32:
    with cs.namespace(f"first xor for {name}"):
        out = a.xor(cs, b)
    with cs.namespace(f"second xor for {name}"):
        return out.xor(cs, c)


def sha256_compression_function(
    cs: ConstraintSystem, block: Sequence[Boolean], current_hash_value: Sequence[UInt32]
) -> List[UInt32]:
    if len(block) != 512:
        raise ValueError(f"Compression input must be 512 bits; received {len(block)}")
    if len(current_hash_value) != 8:
        raise ValueError("Current hash value must be 8 words")

    w = [UInt32.from_bits_be(block[i : i + 32]) for i in range(0, 512, 32)]

    for i in range(16, 64):
        with cs.namespace(f"w extension {i}"):
            s0 = _xor3(cs, "s0", w[i - 15].rotr(7), w[i - 15].rotr(18), w[i - 15].shr(3))
            s1 = _xor3(cs, "s1", w[i - 2].rotr(17), w[i - 2].rotr(19), w[i - 2].shr(10))
            with cs.namespace("computation of w[i]"):
                w.append(UInt32.addmany(cs, [w[i - 16], s0, w[i - 7], s1]))

    a, b, c, d, e, f, g, h = current_hash_value

    for i in range(64):
        with cs.namespace(f"compression round {i}"):
            s1 = _xor3(cs, "S1", e.rotr(6), e.rotr(11), e.rotr(25))
            with cs.namespace("ch"):
                ch = UInt32.sha256_ch(cs, e, f, g)
            temp1 = [h, s1, ch, UInt32.constant(ROUND_CONSTANTS[i]), w[i]]

            s0 = _xor3(cs, "S0", a.rotr(2), a.rotr(13), a.rotr(22))
            with cs.namespace("maj"):
                maj = UInt32.sha256_maj(cs, a, b, c)

            h = g
            g = f
            f = e
            with cs.namespace("new e"):
                e = UInt32.addmany(cs, [d, *temp1])
            d = c
            c = b
            b = a
            with cs.namespace("new a"):
                a = UInt32.addmany(cs, [*temp1, s0, maj])

    new_state = []
    for i, (word, current) in enumerate(zip([a, b, c, d, e, f, g, h], current_hash_value)):
        with cs.namespace(f"new h{i}"):
            new_state.append(UInt32.addmany(cs, [current, word]))
    return new_state


def sha256(cs: ConstraintSystem, bits: Sequence[Boolean]) -> List[Boolean]:
    """SHA-256 of a whole number of bytes; returns the 256 digest bits."""
    if len(bits) % 8 != 0:
        raise ValueError(f"SHA-256 input must be a whole number of bytes; received {len(bits)} bits")

    padded = list(bits)
    length = len(bits)
    padded.append(Boolean.constant(True))
    while (len(padded) + 64) % 512 != 0:
        padded.append(Boolean.constant(False))
    padded.extend(Boolean.constant((length >> i) & 1 == 1) for i in range(63, -1, -1))

    state = get_sha256_iv()
    for i in range(0, len(padded), 512):
        with cs.namespace(f"block {i // 512}"):
            state = sha256_compression_function(cs, padded[i : i + 512], state)

    return [bit for word in state for bit in word.into_bits_be()]
