"""Security: JWT, password hashing, and credential handling."""

from app.infrastructure.security.credentials import CredentialManager
from app.infrastructure.security.jwt import (
    JWTTokenIssuer,
    create_access_token,
    verify_token,
)
from app.infrastructure.security.password import get_password_hash, verify_password

__all__ = [
    "CredentialManager",
    "JWTTokenIssuer",
    "create_access_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
