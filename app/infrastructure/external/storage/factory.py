"""Media store factory: builds the chunked store from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.infrastructure.external.storage.chunked_media_store import ChunkedMediaStore

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.infrastructure.firebase._rest_client import FirestoreRESTClient


class MediaStoreFactory:
    """Factory for media store instances based on configuration."""

    @staticmethod
    def create_media_store(
        client: "FirestoreRESTClient",
        settings: "Settings | None" = None,
    ) -> ChunkedMediaStore:
        """Create the chunked media store from settings.

        Args:
            client: Firestore client holding the files/chunks collections.
            settings: Application settings; if None, uses get_settings().

        Returns:
            ChunkedMediaStore bound to settings.media_collection_prefix.

        Raises:
            ValueError: Missing or invalid media configuration.
        """
        from app.core.config import get_settings

        s = settings or get_settings()
        if not s.media_collection_prefix:
            raise ValueError("MEDIA_COLLECTION_PREFIX required for the media store")
        return ChunkedMediaStore(
            client,
            prefix=s.media_collection_prefix,
            chunk_size=s.media_chunk_size,
        )
