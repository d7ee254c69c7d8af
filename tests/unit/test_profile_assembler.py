"""Tests for ProfileAssembler (image resolution, credential stripping)."""

from dataclasses import fields
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.client import ProfileView
from app.application.services.profile_assembler import ProfileAssembler
from app.core.constants import DEFAULT_AVATAR_URL
from app.domain.entities.client import ClientRecord
from app.infrastructure.exceptions import MediaNotFoundError, StorageDownloadError


@pytest.fixture
def media() -> AsyncMock:
    store = AsyncMock()
    store.read_as_data_url.return_value = "data:image/png;base64,AAAA"
    return store


def _record(image: str = DEFAULT_AVATAR_URL) -> ClientRecord:
    return ClientRecord(
        id="c1",
        email="a@x.com",
        display_name="Ada Lovelace",
        first_name="Ada",
        last_name="Lovelace",
        password_hash="hash",
        password_salt="salt",
        social_id="g-1",
        image=image,
        roles=frozenset({"user"}),
    )


async def test_placeholder_passes_through_without_media_call(media: AsyncMock) -> None:
    view = await ProfileAssembler(media).assemble(_record())
    assert view.image.ok
    assert view.image.value == DEFAULT_AVATAR_URL
    media.read_as_data_url.assert_not_awaited()


async def test_custom_image_resolved_to_data_url(media: AsyncMock) -> None:
    view = await ProfileAssembler(media).assemble(_record("media-1"))
    media.read_as_data_url.assert_awaited_once_with("media-1")
    assert view.image.value == "data:image/png;base64,AAAA"
    assert view.user_id == "c1"
    assert view.social_id == "g-1"
    assert view.roles == frozenset({"user"})


async def test_missing_media_surfaces_failure(media: AsyncMock) -> None:
    """A missing object is reported, never replaced by the placeholder."""
    media.read_as_data_url.side_effect = MediaNotFoundError("media-1")
    view = await ProfileAssembler(media).assemble(_record("media-1"))
    assert not view.image.ok
    assert view.image.value is None
    assert view.image.error_code == "MEDIA_NOT_FOUND"


async def test_storage_error_surfaces_failure(media: AsyncMock) -> None:
    media.read_as_data_url.side_effect = StorageDownloadError("media-1", "chunk 2")
    view = await ProfileAssembler(media).assemble(_record("media-1"))
    assert view.image.error_code == "STORAGE_DOWNLOAD_ERROR"


def test_view_has_no_credential_fields() -> None:
    names = {f.name for f in fields(ProfileView)}
    assert "password_hash" not in names
    assert "password_salt" not in names
