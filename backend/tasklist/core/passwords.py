"""Credential Primitives — password hashing and one-time token generation.

Invariants:
    - Stored hashes have the form "<salt hex>$<digest hex>" (16-byte salt, PBKDF2-HMAC-SHA256)
    - verify_password never raises on malformed hashes; it returns False
    - One-time tokens come from the secrets module (never random)
"""

import hashlib
import hmac
import os
import secrets

PBKDF2_ITERATIONS = 100_000
ACTIVATION_TOKEN_BYTES = 35
RESET_TOKEN_BYTES = 15


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS,
    )
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Recompute the digest with the stored salt and compare in constant time."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac(
        "sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS,
    )
    return hmac.compare_digest(dk, stored_hash)


def generate_activation_token() -> str:
    return secrets.token_hex(ACTIVATION_TOKEN_BYTES)


def generate_reset_token() -> str:
    return secrets.token_hex(RESET_TOKEN_BYTES)
