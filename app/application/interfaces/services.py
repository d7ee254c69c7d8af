"""Service interfaces (ports) for the application layer.

Protocols define contracts for credential handling, token issuance,
identity verification and media storage (DIP).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

if TYPE_CHECKING:
    from app.application.dtos.client import TokenClaims, VerifiedIdentity
    from app.application.dtos.media import MediaMetadata


# Token issuer interface
class ITokenIssuer(Protocol):
    """Protocol for signing bearer tokens from claims (expiry and keys are its concern)."""

    def issue(self, claims: dict[str, Any]) -> str:
        """Return a signed bearer string."""


# Credential manager interface
class ICredentialManager(Protocol):
    """Protocol for password hashing/verification and token issuance."""

    async def hash(self, password: str) -> tuple[str, str]:
        """Return (hash, salt) for a password."""

    async def verify(self, password: str, password_hash: str) -> bool:
        """Return whether password matches password_hash (constant time)."""

    async def verify_dummy(self, password: str) -> None:
        """Spend the same time as verify without a real hash (unknown account)."""

    def issue_token(self, claims: TokenClaims) -> str:
        """Return a signed bearer token for claims."""


# Identity verifier interface (one implementation per provider)
class IIdentityVerifier(Protocol):
    """Capability: turn provider credentials into a verified identity."""

    async def verify(self, credentials: str) -> VerifiedIdentity:
        """Raise AuthenticationException when the credentials are not accepted."""


# Media store interface
class IMediaStore(Protocol):
    """Protocol for the chunked binary object store.

    read_as_data_url raises MediaNotFoundError or StorageException subclasses;
    delete is best effort and reports failure as False.
    """

    async def store(self, stream: BinaryIO, content_type: str, filename: str) -> str:
        """Store content and return the new object id."""

    def open_download_stream(self, object_id: str) -> AsyncIterator[bytes]:
        """Yield the object's chunks in stored order."""

    async def read_as_data_url(self, object_id: str) -> str:
        """Return data:<content_type>;base64,<payload> for the whole object."""

    async def delete(self, object_id: str) -> bool:
        """Remove object and chunks; False if absent or on failure."""

    async def metadata(self, object_id: str) -> MediaMetadata:
        """Return the object's metadata."""

    def list_objects(self) -> AsyncIterator[MediaMetadata]:
        """Yield metadata for every stored object."""
