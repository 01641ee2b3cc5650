import pytest

from preimage_proof.constraint_system import RecordingConstraintSystem
from preimage_proof.curves import get_curve


@pytest.fixture
def cs() -> RecordingConstraintSystem:
    return RecordingConstraintSystem(get_curve("bls12_381").order)
