"""Infrastructure exceptions for media storage and external operations.

Storage errors extend ClienteleException so presentation can map them
to HTTP responses consistently.
"""

from app.domain.exceptions import ClienteleException


class StorageException(ClienteleException):
    """Base exception for media storage operations."""


class MediaNotFoundError(StorageException):
    """Media object (metadata document) not found in the chunked store."""

    def __init__(self, object_id: str) -> None:
        super().__init__(
            f"Media object not found: {object_id}",
            "MEDIA_NOT_FOUND",
            {"object_id": object_id},
        )


class StorageUploadError(StorageException):
    """Storing a media object failed (nothing is left visible)."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(
            f"Failed to store media: {filename}",
            "STORAGE_UPLOAD_ERROR",
            {"filename": filename, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """Reading a media object failed or its chunk sequence is incomplete."""

    def __init__(self, object_id: str, reason: str) -> None:
        super().__init__(
            f"Failed to read media: {object_id}",
            "STORAGE_DOWNLOAD_ERROR",
            {"object_id": object_id, "reason": reason},
        )


class IdentityProviderError(ClienteleException):
    """Third-party identity provider could not be reached or returned garbage."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(
            f"Identity provider error: {provider}",
            "IDENTITY_PROVIDER_ERROR",
            {"provider": provider, "reason": reason},
        )
