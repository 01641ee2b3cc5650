import struct
from pathlib import Path

import pytest

from preimage_proof.constraint_system import LinearCombination
from preimage_proof.r1cs_file import encode_r1cs, encode_sym, wire_assignment, wire_name, write_circuit_files


def _sections(data: bytes):
    magic, version, count = struct.unpack_from("<4sII", data, 0)
    assert magic == b"r1cs"
    assert version == 1
    offset = 12
    sections = {}
    for _ in range(count):
        kind, size = struct.unpack_from("<IQ", data, offset)
        offset += 12
        sections[kind] = data[offset : offset + size]
        offset += size
    assert offset == len(data)
    return sections


def _read_lc(body: bytes, offset: int):
    (count,) = struct.unpack_from("<I", body, offset)
    offset += 4
    terms = {}
    for _ in range(count):
        (wire,) = struct.unpack_from("<I", body, offset)
        terms[wire] = int.from_bytes(body[offset + 4 : offset + 36], "little")
        offset += 36
    return terms, offset


def _square(cs):
    x = cs.alloc("x", 3)
    y = cs.alloc_input("y", 9)
    cs.enforce("x squared", LinearCombination({x: 1}), LinearCombination({x: 1}), LinearCombination({y: 1}))
    return x, y


def test_header_describes_wires_and_constraints(cs):
    _square(cs)
    header = _sections(encode_r1cs(cs))[1]

    (size,) = struct.unpack_from("<I", header, 0)
    assert size == 32
    assert int.from_bytes(header[4:36], "little") == cs.modulus
    wires, pub_out, pub_in, prv_in, labels, constraints = struct.unpack_from("<IIIIQI", header, 36)
    assert (wires, pub_out, pub_in, prv_in, labels, constraints) == (3, 1, 0, 0, 3, 1)


def test_constraints_use_input_then_aux_wires(cs):
    x, _ = _square(cs)
    cs.enforce("x is one", cs.ONE - x, LinearCombination({cs.ONE: 1}), LinearCombination())
    body = _sections(encode_r1cs(cs))[2]

    a, offset = _read_lc(body, 0)
    b, offset = _read_lc(body, offset)
    c, offset = _read_lc(body, offset)
    assert (a, b, c) == ({2: 1}, {2: 1}, {1: 1})

    a, offset = _read_lc(body, offset)
    b, offset = _read_lc(body, offset)
    c, offset = _read_lc(body, offset)
    assert a == {0: 1, 2: cs.modulus - 1}
    assert b == {0: 1}
    assert c == {}
    assert offset == len(body)


def test_cancelled_terms_are_dropped(cs):
    x = cs.alloc("x", 1)
    cs.enforce("cancel", x + x - x * 2 + cs.ONE, LinearCombination({cs.ONE: 1}), LinearCombination({cs.ONE: 1}))
    a, _ = _read_lc(_sections(encode_r1cs(cs))[2], 0)
    assert a == {0: 1}


def test_symbols_skip_the_constant_wire(cs):
    _square(cs)
    assert encode_sym(cs).splitlines() == ["1,1,0,main.w1", "2,2,0,main.w2"]


def test_write_circuit_files(cs, tmp_path: Path):
    _square(cs)
    r1cs_path, sym_path = write_circuit_files(cs, tmp_path / "build")
    assert r1cs_path.read_bytes() == encode_r1cs(cs)
    assert sym_path.read_text(encoding="utf-8") == encode_sym(cs)


def test_wire_assignment_for_prover_and_verifier(cs):
    _square(cs)
    assert wire_assignment(cs) == {wire_name(1): 9, wire_name(2): 3}
    assert wire_assignment(cs, [4]) == {"main.w1": 4, "main.w2": 0}


def test_wire_assignment_needs_every_value(cs):
    cs.alloc("unknown", None)
    with pytest.raises(ValueError):
        wire_assignment(cs)
