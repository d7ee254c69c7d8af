"""Tests for the ClientLifecycle facade.

Picture-slot transitions use mocked collaborators; the registration and
sign-in scenarios run against the in-memory store with real bcrypt and JWT.
"""

import base64
import io
import threading
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.dtos.client import (
    ProfileUpdate,
    RegistrationInput,
    VerifiedIdentity,
)
from app.application.services.client_lifecycle import ClientLifecycle
from app.core.config import Settings
from app.core.constants import DEFAULT_AVATAR_URL
from app.domain.entities.client import ClientRecord
from app.domain.exceptions import (
    AuthenticationException,
    ClientNotFoundException,
    EmailAlreadyExistsException,
    ValidationException,
)
from app.infrastructure.security import verify_token
from tests.fakes import FakeFirestore

PNG = b"\x89PNG\r\n\x1a\n-fake-image-a"
JPEG = b"\xff\xd8\xff-fake-image-b"


def _record(image: str = DEFAULT_AVATAR_URL) -> ClientRecord:
    return ClientRecord(
        id="c1",
        email="a@x.com",
        display_name="Ada Lovelace",
        first_name="Ada",
        last_name="Lovelace",
        password_hash="hash",
        password_salt="salt",
        image=image,
    )


@pytest.fixture
def profiles() -> AsyncMock:
    repo = AsyncMock()
    repo.find_by_id.return_value = _record()
    return repo


@pytest.fixture
def media() -> AsyncMock:
    store = AsyncMock()
    store.store.return_value = "new-id"
    store.delete.return_value = True
    return store


@pytest.fixture
def mocked_lifecycle(profiles: AsyncMock, media: AsyncMock) -> ClientLifecycle:
    credentials = AsyncMock()
    credentials.issue_token = MagicMock(return_value="token")
    return ClientLifecycle(profiles=profiles, media=media, credentials=credentials)


# ---- Picture slot (mocked collaborators) ----


async def test_set_picture_from_placeholder_never_deletes(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    new_id = await mocked_lifecycle.set_picture("c1", io.BytesIO(PNG), "image/png", "a.png")
    assert new_id == "new-id"
    media.delete.assert_not_awaited()
    profiles.set_image.assert_awaited_once_with("c1", "new-id")


async def test_set_picture_replaces_and_deletes_old(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    profiles.find_by_id.return_value = _record("old-id")
    new_id = await mocked_lifecycle.set_picture("c1", io.BytesIO(JPEG), "image/jpeg", "b.jpg")
    media.delete.assert_awaited_once_with("old-id")
    profiles.set_image.assert_awaited_once_with("c1", new_id)


async def test_set_picture_old_delete_failure_still_points_at_new(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    profiles.find_by_id.return_value = _record("old-id")
    media.delete.return_value = False
    await mocked_lifecycle.set_picture("c1", io.BytesIO(PNG), "image/png", "a.png")
    profiles.set_image.assert_awaited_once_with("c1", "new-id")


async def test_set_picture_store_happens_before_delete(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    profiles.find_by_id.return_value = _record("old-id")
    await mocked_lifecycle.set_picture("c1", io.BytesIO(PNG), "image/png", "a.png")
    assert [c[0] for c in media.method_calls] == ["store", "delete"]


@pytest.mark.parametrize("content_type", ["", "text/plain", "application/pdf"])
async def test_set_picture_rejects_type(
    mocked_lifecycle: ClientLifecycle, media: AsyncMock, content_type: str
) -> None:
    with pytest.raises(ValidationException):
        await mocked_lifecycle.set_picture("c1", io.BytesIO(PNG), content_type, "a")
    media.store.assert_not_awaited()


async def test_set_picture_rejects_oversized(
    profiles: AsyncMock, media: AsyncMock, settings: Settings
) -> None:
    lifecycle = ClientLifecycle(
        profiles=profiles,
        media=media,
        credentials=AsyncMock(),
        settings=settings.model_copy(update={"max_picture_size": 10}),
    )
    with pytest.raises(ValidationException):
        await lifecycle.set_picture("c1", io.BytesIO(b"x" * 11), "image/png", "a.png")
    media.store.assert_not_awaited()


async def test_set_picture_reads_upload_off_the_event_loop(
    mocked_lifecycle: ClientLifecycle, media: AsyncMock
) -> None:
    readers: list[int] = []

    class _Upload(io.BytesIO):
        def read(self, size: int | None = -1) -> bytes:
            readers.append(threading.get_ident())
            return super().read(size)

    await mocked_lifecycle.set_picture("c1", _Upload(PNG), "image/png", "a.png")
    assert readers
    assert threading.get_ident() not in readers
    stored = media.store.await_args.args[0]
    assert stored.read() == PNG


async def test_set_picture_unknown_client(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    profiles.find_by_id.side_effect = ClientNotFoundException("c404")
    with pytest.raises(ClientNotFoundException):
        await mocked_lifecycle.set_picture("c404", io.BytesIO(PNG), "image/png", "a.png")
    media.store.assert_not_awaited()


async def test_delete_picture_from_placeholder_is_noop(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    assert await mocked_lifecycle.delete_picture("c1") is True
    media.delete.assert_not_awaited()
    profiles.set_image.assert_not_awaited()


@pytest.mark.parametrize("outcome", [True, False])
async def test_delete_picture_resets_regardless_of_outcome(
    mocked_lifecycle: ClientLifecycle,
    profiles: AsyncMock,
    media: AsyncMock,
    outcome: bool,
) -> None:
    profiles.find_by_id.return_value = _record("old-id")
    media.delete.return_value = outcome
    assert await mocked_lifecycle.delete_picture("c1") is outcome
    media.delete.assert_awaited_once_with("old-id")
    profiles.set_image.assert_awaited_once_with("c1", DEFAULT_AVATAR_URL)


async def test_delete_account_missing_returns_false_without_media_call(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    profiles.find_by_id.side_effect = ClientNotFoundException("c404")
    assert await mocked_lifecycle.delete_account("c404") is False
    media.delete.assert_not_awaited()
    profiles.delete.assert_not_awaited()


async def test_delete_account_removes_media_then_record(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    profiles.find_by_id.return_value = _record("old-id")
    profiles.delete.return_value = True
    assert await mocked_lifecycle.delete_account("c1") is True
    media.delete.assert_awaited_once_with("old-id")
    profiles.delete.assert_awaited_once_with("c1")


async def test_delete_account_with_placeholder_skips_media(
    mocked_lifecycle: ClientLifecycle, profiles: AsyncMock, media: AsyncMock
) -> None:
    profiles.delete.return_value = True
    assert await mocked_lifecycle.delete_account("c1") is True
    media.delete.assert_not_awaited()


# ---- Scenarios (in-memory store) ----


async def test_register_returns_token_and_placeholder_record(
    lifecycle: ClientLifecycle, fake_firestore: FakeFirestore, settings: Settings
) -> None:
    token = await lifecycle.register(
        RegistrationInput(email=" A@x.com ", password="secret", first_name="Ada", last_name="Lovelace")
    )
    payload = verify_token(token, settings)
    assert payload["username"] == "a@x.com"
    (stored,) = fake_firestore.docs("clients").values()
    assert stored["image"] == DEFAULT_AVATAR_URL
    assert stored["display_name"] == "Ada Lovelace"
    assert stored["is_admin"] is False
    assert set(stored["roles"]) == {"user"}


async def test_register_same_email_twice(
    lifecycle: ClientLifecycle, fake_firestore: FakeFirestore
) -> None:
    await lifecycle.register(RegistrationInput(email="a@x.com", password="secret"))
    with pytest.raises(EmailAlreadyExistsException):
        await lifecycle.register(RegistrationInput(email="a@x.com", password="other"))
    assert len(fake_firestore.docs("clients")) == 1


async def test_picture_scenarios(
    lifecycle: ClientLifecycle, fake_firestore: FakeFirestore, settings: Settings
) -> None:
    """Set A on a fresh account, replace with B, then delete."""
    token = await lifecycle.register(RegistrationInput(email="a@x.com", password="secret"))
    client_id = verify_token(token, settings)["sub"]
    files = fake_firestore.docs("profile_pictures_files")

    obj_a = await lifecycle.set_picture(client_id, io.BytesIO(PNG), "image/png", "a.png")
    assert fake_firestore.count("delete") == 0
    view = await lifecycle.get_profile(client_id)
    assert view.image.value == "data:image/png;base64," + base64.b64encode(PNG).decode()

    obj_b = await lifecycle.set_picture(client_id, io.BytesIO(JPEG), "image/jpeg", "b.jpg")
    assert obj_a not in files
    assert obj_b in files
    view = await lifecycle.get_profile(client_id)
    assert view.image.value.startswith("data:image/jpeg;base64,")

    assert await lifecycle.delete_picture(client_id) is True
    assert files == {}
    assert fake_firestore.docs("profile_pictures_chunks") == {}
    view = await lifecycle.get_profile(client_id)
    assert view.image.value == DEFAULT_AVATAR_URL


async def test_wrong_password_and_unknown_email_are_distinct(
    lifecycle: ClientLifecycle,
) -> None:
    await lifecycle.register(RegistrationInput(email="a@x.com", password="secret"))
    with pytest.raises(AuthenticationException):
        await lifecycle.authenticate_password("a@x.com", "wrong")
    with pytest.raises(ClientNotFoundException):
        await lifecycle.authenticate_password("nobody@x.com", "any")


async def test_login_issues_token_for_profile(
    lifecycle: ClientLifecycle, settings: Settings
) -> None:
    await lifecycle.register(RegistrationInput(email="a@x.com", password="secret"))
    result = await lifecycle.login("A@X.COM", "secret")
    payload = verify_token(result.access_token, settings)
    assert payload["sub"] == result.profile.user_id
    assert payload["username"] == "a@x.com"
    assert result.profile.image.value == DEFAULT_AVATAR_URL


async def test_update_profile(lifecycle: ClientLifecycle, settings: Settings) -> None:
    token = await lifecycle.register(RegistrationInput(email="a@x.com", password="secret"))
    client_id = verify_token(token, settings)["sub"]
    view = await lifecycle.update_profile(
        client_id, ProfileUpdate(last_name="King", password="new-secret")
    )
    assert view.last_name == "King"
    await lifecycle.authenticate_password("a@x.com", "new-secret")
    with pytest.raises(AuthenticationException):
        await lifecycle.authenticate_password("a@x.com", "secret")


async def test_update_profile_requires_a_field(lifecycle: ClientLifecycle) -> None:
    with pytest.raises(ValidationException):
        await lifecycle.update_profile("c1", ProfileUpdate())


async def test_delete_account_removes_record_and_media(
    lifecycle: ClientLifecycle, fake_firestore: FakeFirestore, settings: Settings
) -> None:
    token = await lifecycle.register(RegistrationInput(email="a@x.com", password="secret"))
    client_id = verify_token(token, settings)["sub"]
    await lifecycle.set_picture(client_id, io.BytesIO(PNG), "image/png", "a.png")
    assert await lifecycle.delete_account(client_id) is True
    assert fake_firestore.docs("clients") == {}
    assert fake_firestore.docs("profile_pictures_files") == {}
    assert fake_firestore.docs("profile_pictures_chunks") == {}
    assert await lifecycle.delete_account(client_id) is False


# ---- Social identity ----


def _identity(**overrides) -> VerifiedIdentity:
    fields = {
        "social_id": "g-1",
        "email": "a@x.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "picture_url": "https://example.com/a.png",
    }
    fields.update(overrides)
    return VerifiedIdentity(**fields)


async def test_social_identity_creates_then_finds(
    lifecycle: ClientLifecycle, fake_firestore: FakeFirestore
) -> None:
    first = await lifecycle.validate_social_identity(_identity())
    assert first.social_id == "g-1"
    assert first.display_name == "Ada Lovelace"
    assert first.image.value == DEFAULT_AVATAR_URL
    again = await lifecycle.validate_social_identity(_identity())
    assert again.user_id == first.user_id
    assert len(fake_firestore.docs("clients")) == 1


async def test_social_account_has_unusable_password(lifecycle: ClientLifecycle) -> None:
    await lifecycle.validate_social_identity(_identity())
    with pytest.raises(AuthenticationException):
        await lifecycle.authenticate_password("a@x.com", "")


async def test_social_identity_links_existing_email(
    lifecycle: ClientLifecycle, fake_firestore: FakeFirestore
) -> None:
    await lifecycle.register(RegistrationInput(email="a@x.com", password="secret"))
    view = await lifecycle.validate_social_identity(_identity())
    assert view.social_id == "g-1"
    assert len(fake_firestore.docs("clients")) == 1
    await lifecycle.authenticate_password("a@x.com", "secret")


async def test_social_identity_conflicting_link(lifecycle: ClientLifecycle) -> None:
    await lifecycle.validate_social_identity(_identity())
    with pytest.raises(AuthenticationException):
        await lifecycle.validate_social_identity(_identity(social_id="g-2"))


async def test_sign_in_with_provider(lifecycle: ClientLifecycle, settings: Settings) -> None:
    verifier = AsyncMock()
    verifier.verify.return_value = _identity()
    result = await lifecycle.sign_in_with_provider(verifier, "provider-token")
    verifier.verify.assert_awaited_once_with("provider-token")
    assert verify_token(result.access_token, settings)["sub"] == result.profile.user_id


async def test_sign_in_with_rejected_credentials(lifecycle: ClientLifecycle) -> None:
    verifier = AsyncMock()
    verifier.verify.side_effect = AuthenticationException("rejected")
    with pytest.raises(AuthenticationException):
        await lifecycle.sign_in_with_provider(verifier, "bad")
