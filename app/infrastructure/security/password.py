"""Password hashing (bcrypt with SHA-256 pre-hash).

Bcrypt truncates inputs at 72 bytes; pre-hashing with SHA-256 yields a fixed-length
input so long passwords are not silently truncated. The salt is generated per
password with a configurable cost factor and is also embedded in the hash.
"""

import base64
import hashlib

import bcrypt

from app.domain.exceptions import CredentialException


def _prehash(password: str) -> bytes:
    """SHA-256 pre-hash to avoid bcrypt's 72-byte truncation."""
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def get_password_hash(password: str, rounds: int = 10) -> tuple[str, str]:
    """Return (hash, salt) for password using a fresh bcrypt salt of the given cost.

    Raises:
        CredentialException: If bcrypt rejects the cost factor or input.
    """
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        hashed = bcrypt.hashpw(_prehash(password), salt)
    except (ValueError, TypeError) as e:
        raise CredentialException(f"Password hashing failed: {e}") from e
    return hashed.decode("utf-8"), salt.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches hashed_password.

    bcrypt.checkpw compares in constant time. A malformed stored hash is a
    credential failure, not a wrong password.

    Raises:
        CredentialException: If the stored hash is not a valid bcrypt hash.
    """
    try:
        return bool(
            bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8"))
        )
    except (ValueError, TypeError) as e:
        raise CredentialException(f"Password verification failed: {e}") from e
