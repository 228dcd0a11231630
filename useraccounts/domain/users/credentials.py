# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Salted PBKDF2 password hashing."""

from __future__ import annotations

import hashlib
import hmac
import secrets

SALT_BYTES = 16
ITERATIONS = 10_000
KEY_LENGTH = 512
DIGEST = "sha512"


def generate_salt() -> str:
    return secrets.token_hex(SALT_BYTES)


def derive_hash(password: str, salt: str) -> str:
    # Fixed parameters for every user; only the salt varies.
    key = hashlib.pbkdf2_hmac(
        DIGEST,
        password.encode("utf-8"),
        salt.encode("utf-8"),
        ITERATIONS,
        dklen=KEY_LENGTH,
    )
    return key.hex()


def hashes_match(candidate: str, stored: str) -> bool:
    return hmac.compare_digest(candidate.encode("ascii"), stored.encode("ascii"))


__all__ = [
    "DIGEST",
    "ITERATIONS",
    "KEY_LENGTH",
    "SALT_BYTES",
    "derive_hash",
    "generate_salt",
    "hashes_match",
]
