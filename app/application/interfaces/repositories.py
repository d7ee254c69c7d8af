"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain entities only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.client import ClientCreate, ProfileUpdate
    from app.domain.entities.client import ClientRecord


# Client profile store interface
class IClientRepository(Protocol):
    """Protocol for the client profile store (DIP).

    Lookups raise ClientNotFoundException when nothing matches; create raises
    EmailAlreadyExistsException on a duplicate email.
    """

    async def create(self, data: ClientCreate) -> ClientRecord:
        """Persist a new record with a freshly hashed password."""

    async def find_by_id(self, client_id: str) -> ClientRecord:
        """Return record by ID."""

    async def find_by_email(self, email: str) -> ClientRecord:
        """Return record by (normalized) email."""

    async def find_by_social_id(self, social_id: str) -> ClientRecord:
        """Return record linked to a third-party identity."""

    async def update(self, client_id: str, data: ProfileUpdate) -> ClientRecord:
        """Merge supplied fields; return the post-update record."""

    async def set_image(self, client_id: str, image: str) -> ClientRecord:
        """Replace the image reference; return the post-update record."""

    async def link_social_id(self, client_id: str, social_id: str) -> ClientRecord:
        """Attach a third-party identity to an existing record."""

    async def delete(self, client_id: str) -> bool:
        """Remove the record; False if it did not exist."""

    def iter_image_refs(self) -> AsyncIterator[tuple[str, str]]:
        """Yield (client_id, image) for every record."""
