import itertools

import pytest

from preimage_proof.boolean import AllocatedBit, Boolean


def _alloc_bits(cs, *values):
    bits = []
    for i, value in enumerate(values):
        with cs.namespace(f"bit {i}"):
            bits.append(AllocatedBit.alloc(cs, value))
    return bits


def test_alloc_enforces_booleanity(cs):
    with cs.namespace("x"):
        AllocatedBit.alloc(cs, True)
    assert cs.is_satisfied()
    assert cs.get("x/boolean") == 1

    cs.set("x/boolean", 2)
    assert cs.which_is_unsatisfied() == "x/boolean constraint"


@pytest.mark.parametrize(
    "op, annotation, expected",
    [
        (AllocatedBit.xor, "xor result", lambda a, b: a != b),
        (AllocatedBit.and_, "and result", lambda a, b: a and b),
        (AllocatedBit.and_not, "and not result", lambda a, b: a and not b),
        (AllocatedBit.nor, "nor result", lambda a, b: not a and not b),
    ],
)
def test_allocated_bit_truth_tables(cs, op, annotation, expected):
    for i, (a_value, b_value) in enumerate(itertools.product([False, True], repeat=2)):
        with cs.namespace(f"case {i}"):
            a, b = _alloc_bits(cs, a_value, b_value)
            result = op(cs, a, b)
        assert result.value == expected(a_value, b_value)
        assert cs.get(f"case {i}/{annotation}") == int(expected(a_value, b_value))
    assert cs.is_satisfied()


def test_wrong_xor_result_is_caught(cs):
    a, b = _alloc_bits(cs, True, False)
    AllocatedBit.xor(cs, a, b)
    cs.set("xor result", 0)
    assert cs.which_is_unsatisfied() == "xor constraint"


def test_constant_operands_add_no_constraints(cs):
    (a,) = _alloc_bits(cs, True)
    bit = Boolean.from_bit(a)
    before = cs.num_constraints

    assert Boolean.xor(cs, bit, Boolean.constant(False)) == bit
    assert Boolean.xor(cs, bit, Boolean.constant(True)).get_value() is False
    assert Boolean.and_(cs, bit, Boolean.constant(False)).get_value() is False
    assert Boolean.and_(cs, Boolean.constant(True), bit) == bit
    assert cs.num_constraints == before


def test_negated_inputs(cs):
    for i, (a_value, b_value) in enumerate(itertools.product([False, True], repeat=2)):
        with cs.namespace(f"case {i}"):
            a, b = _alloc_bits(cs, a_value, b_value)
            x, y = Boolean.from_bit(a), Boolean.from_bit(b)
            for j, (left, right) in enumerate([(x.not_(), y), (x, y.not_()), (x.not_(), y.not_())]):
                with cs.namespace(f"and {j}"):
                    result = Boolean.and_(cs, left, right)
                assert result.get_value() == (left.get_value() and right.get_value())
                with cs.namespace(f"xor {j}"):
                    result = Boolean.xor(cs, left, right)
                assert result.get_value() == (left.get_value() != right.get_value())
    assert cs.is_satisfied()


def test_sha256_ch_and_maj(cs):
    for i, values in enumerate(itertools.product([False, True], repeat=3)):
        with cs.namespace(f"case {i}"):
            a, b, c = (Boolean.from_bit(bit) for bit in _alloc_bits(cs, *values))
            ch = Boolean.sha256_ch(cs, a, b, c)
            maj = Boolean.sha256_maj(cs, a, b, c)
        va, vb, vc = values
        assert ch.get_value() == ((va and vb) != ((not va) and vc))
        assert maj.get_value() == (((va and vb) != (va and vc)) != (vb and vc))
    assert cs.is_satisfied()


def test_sha256_ch_with_constants_is_constant(cs):
    result = Boolean.sha256_ch(cs, Boolean.constant(True), Boolean.constant(False), Boolean.constant(True))
    assert result.is_constant
    assert result.get_value() is False
    assert cs.num_constraints == 0


def test_unknown_values_propagate(cs):
    a, b = _alloc_bits(cs, None, None)
    result = AllocatedBit.xor(cs, a, b)
    assert result.value is None
    assert Boolean.from_bit(result).get_value() is None
    assert cs.which_is_unsatisfied() == "bit 0/boolean constraint"
