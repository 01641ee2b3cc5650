"""Plaintext hashing outside the circuit."""

from __future__ import annotations

import hashlib


def double_sha256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()
