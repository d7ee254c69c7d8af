"""Builds the externally visible ProfileView from a ClientRecord."""

from __future__ import annotations

import logging

from app.application.dtos.client import ImageResolution, ProfileView
from app.application.interfaces.services import IMediaStore
from app.core.constants import DEFAULT_AVATAR_URL
from app.domain.entities.client import ClientRecord
from app.infrastructure.exceptions import MediaNotFoundError, StorageException

logger = logging.getLogger(__name__)


class ProfileAssembler:
    """Resolve a record's image reference and drop credential fields."""

    def __init__(self, media: IMediaStore) -> None:
        self._media = media

    async def resolve_image(self, image: str) -> ImageResolution:
        """Return the placeholder as-is, or the media object as a data URL.

        Lookup failures are returned as a failed resolution carrying the
        error code; the placeholder is never substituted for a missing object.
        """
        if image == DEFAULT_AVATAR_URL:
            return ImageResolution.resolved(image)
        try:
            return ImageResolution.resolved(await self._media.read_as_data_url(image))
        except MediaNotFoundError as e:
            logger.warning("Profile image %s not found", image)
            return ImageResolution.failed(e.error_code)
        except StorageException as e:
            logger.error("Profile image %s could not be read: %s", image, e.message)
            return ImageResolution.failed(e.error_code or "STORAGE_ERROR")

    async def assemble(self, record: ClientRecord) -> ProfileView:
        """Build the view for record."""
        return ProfileView(
            social_id=record.social_id,
            user_id=record.id,
            email=record.email,
            display_name=record.display_name,
            first_name=record.first_name,
            last_name=record.last_name,
            image=await self.resolve_image(record.image),
            is_admin=record.is_admin,
            roles=record.roles,
        )
