"""Error types raised while building and proving circuits."""

from __future__ import annotations


class SynthesisError(RuntimeError):
    """Raised when constraint synthesis cannot proceed."""


class AssignmentMissingError(SynthesisError):
    """Raised when proving needs a value the circuit did not supply."""


class MalformedVerifyingKeyError(SynthesisError):
    """Raised when a key or proof does not belong to the circuit it is used with."""


class DuplicatePathError(SynthesisError):
    """Raised when two variables or constraints share a namespace path."""


class PreimageLengthError(ValueError):
    """Raised when a preimage is not exactly the expected number of bytes."""


class MalformedProofError(ValueError):
    """Raised when serialized proof data cannot be decoded."""


class PublicInputError(ValueError):
    """Raised when a public input is not a canonical scalar of the curve."""
