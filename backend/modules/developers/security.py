"""
Credential helpers for developer accounts.

Passwords are stored as PBKDF2-HMAC-SHA256 of the password and a
per-developer salt. Tokens are random hex strings.
"""

import hashlib
import hmac
import secrets

_PBKDF2_ROUNDS = 600_000


def generate_salt() -> str:
    return secrets.token_hex(16)


def generate_token() -> str:
    return secrets.token_hex(32)


def hash_password(password: str, salt: str) -> str:
    """Hash a password with the developer's salt."""
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        _PBKDF2_ROUNDS,
    )
    return digest.hex()


def verify_password(password: str, salt: str, password_hash: str) -> bool:
    """Constant-time comparison of a candidate password against the stored hash."""
    if not password_hash:
        return False
    return hmac.compare_digest(hash_password(password, salt), password_hash)
