"""Credential manager: password hashing/verification and bearer-token issuance.

Hashing and verification are CPU-bound (bcrypt) and run in a worker thread
so they do not block the event loop. Passwords are never logged.
"""

from __future__ import annotations

import asyncio
import logging

from app.application.dtos.client import TokenClaims
from app.application.interfaces.services import ITokenIssuer
from app.domain.exceptions import CredentialException, ValidationException
from app.infrastructure.security.password import get_password_hash, verify_password

logger = logging.getLogger(__name__)


class CredentialManager:
    """Implements ICredentialManager on bcrypt plus an injected token issuer."""

    def __init__(self, token_issuer: ITokenIssuer, rounds: int = 10) -> None:
        self._token_issuer = token_issuer
        self._rounds = rounds
        self._dummy_hash: str | None = None

    async def hash(self, password: str) -> tuple[str, str]:
        """Return (hash, salt) for password.

        Raises:
            ValidationException: If password is empty.
            CredentialException: If hashing fails.
        """
        if not password:
            raise ValidationException("Password must not be empty", field="password")
        return await asyncio.to_thread(get_password_hash, password, self._rounds)

    async def verify(self, password: str, password_hash: str) -> bool:
        """Return True if password matches password_hash.

        Raises:
            CredentialException: If the stored hash is unusable.
        """
        if not password_hash:
            raise CredentialException("No password hash stored for this account")
        return await asyncio.to_thread(verify_password, password, password_hash)

    async def verify_dummy(self, password: str) -> None:
        """Run a verification against a throwaway hash (timing-attack mitigation)."""
        if self._dummy_hash is None:
            self._dummy_hash, _ = await asyncio.to_thread(
                get_password_hash, "not-a-real-password", self._rounds
            )
        await asyncio.to_thread(verify_password, password or "-", self._dummy_hash)

    def issue_token(self, claims: TokenClaims) -> str:
        """Return a signed bearer token embedding sub and username.

        Raises:
            CredentialException: If the issuer cannot sign the claims.
        """
        try:
            return self._token_issuer.issue(claims.to_payload())
        except (ValueError, TypeError) as e:
            logger.error("Token issuance failed for subject %s", claims.subject_id)
            raise CredentialException(f"Token issuance failed: {e}") from e
