"""Client lifecycle facade: registration, sign-in, profile and picture management.

Picture transitions touch two resources (the client record and the media
object) without a transaction between them:

    set_picture:    store new -> delete old (best effort) -> point record at new
    delete_picture: delete old -> point record at placeholder

A failure between steps can leave an orphaned media object or a record that
references a missing one. MediaReconciler sweeps both cases.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import BinaryIO

from app.application.dtos.client import (
    AuthResult,
    ClientCreate,
    ProfileUpdate,
    ProfileView,
    RegistrationInput,
    TokenClaims,
    VerifiedIdentity,
)
from app.application.interfaces.repositories import IClientRepository
from app.application.interfaces.services import (
    ICredentialManager,
    IIdentityVerifier,
    IMediaStore,
)
from app.application.services.profile_assembler import ProfileAssembler
from app.core.config import Settings
from app.core.constants import (
    DEFAULT_AVATAR_URL,
    DEFAULT_CLIENT_ROLE,
    DEFAULT_MAX_PICTURE_SIZE,
    DEFAULT_PICTURE_TYPES,
)
from app.domain.entities.client import ClientRecord
from app.domain.enums import PictureSlot
from app.domain.exceptions import (
    AuthenticationException,
    ClientNotFoundException,
    ValidationException,
)
from app.domain.value_objects.core import EmailAddress
from app.shared.utils.generators import generate_unusable_password

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    try:
        return EmailAddress(email).value
    except ValueError as e:
        raise ValidationException(str(e), field="email") from e


def _display_name(first_name: str, last_name: str) -> str:
    return f"{first_name.strip()} {last_name.strip()}".strip()


class ClientLifecycle:
    """Facade consumed by the HTTP layer.

    All collaborators are passed in; the facade keeps no per-request state
    and does no locking (record updates are atomic per document in the store).
    """

    def __init__(
        self,
        profiles: IClientRepository,
        media: IMediaStore,
        credentials: ICredentialManager,
        assembler: ProfileAssembler | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._profiles = profiles
        self._media = media
        self._credentials = credentials
        self._assembler = assembler or ProfileAssembler(media)
        if settings is not None:
            self._max_picture_size = settings.max_picture_size
            self._picture_types = settings.allowed_picture_type_set
        else:
            self._max_picture_size = DEFAULT_MAX_PICTURE_SIZE
            self._picture_types = DEFAULT_PICTURE_TYPES

    def _token_for(self, user_id: str, email: str) -> str:
        return self._credentials.issue_token(
            TokenClaims(subject_id=user_id, username=email)
        )

    async def register(self, data: RegistrationInput) -> str:
        """Create a client and return a bearer token for it.

        Raises:
            ValidationException: On an invalid email or empty password.
            EmailAlreadyExistsException: If the email is already registered.
        """
        email = _normalize_email(data.email)
        record = await self._profiles.create(
            ClientCreate(
                email=email,
                password=data.password,
                display_name=_display_name(data.first_name, data.last_name),
                first_name=data.first_name.strip(),
                last_name=data.last_name.strip(),
                roles=frozenset({DEFAULT_CLIENT_ROLE}),
            )
        )
        logger.info("Registered client %s", record.id)
        return self._token_for(record.id, record.email)

    async def _authenticate_record(self, email: str, password: str) -> ClientRecord:
        try:
            record = await self._profiles.find_by_email(email)
        except ClientNotFoundException:
            await self._credentials.verify_dummy(password)
            raise
        if not await self._credentials.verify(password, record.password_hash):
            logger.info("Password mismatch for client %s", record.id)
            raise AuthenticationException("Invalid email or password")
        return record

    async def authenticate_password(self, email: str, password: str) -> ProfileView:
        """Check email and password; return the profile on success.

        Raises:
            ClientNotFoundException: If no client has this email.
            AuthenticationException: If the password does not match.
        """
        record = await self._authenticate_record(email, password)
        return await self._assembler.assemble(record)

    async def login(self, email: str, password: str) -> AuthResult:
        """authenticate_password plus a token for {sub: user_id, username: email}."""
        profile = await self.authenticate_password(email, password)
        return AuthResult(
            access_token=self._token_for(profile.user_id, profile.email),
            profile=profile,
        )

    async def validate_social_identity(self, identity: VerifiedIdentity) -> ProfileView:
        """Find or create the client for a verified third-party identity.

        Lookup order: social id, then an existing account with the same email
        (which gets the social id linked), then a new account with an unusable
        random password and the placeholder image.

        Raises:
            AuthenticationException: If the email belongs to an account linked
                to a different identity.
        """
        try:
            record = await self._profiles.find_by_social_id(identity.social_id)
            return await self._assembler.assemble(record)
        except ClientNotFoundException:
            pass

        email = _normalize_email(identity.email)
        try:
            existing = await self._profiles.find_by_email(email)
        except ClientNotFoundException:
            existing = None

        if existing is not None:
            if existing.social_id and existing.social_id != identity.social_id:
                logger.warning(
                    "Client %s is already linked to another identity", existing.id
                )
                raise AuthenticationException(
                    "Email is linked to a different sign-in identity"
                )
            record = await self._profiles.link_social_id(existing.id, identity.social_id)
            logger.info("Linked social identity to client %s", record.id)
            return await self._assembler.assemble(record)

        record = await self._profiles.create(
            ClientCreate(
                email=email,
                password=generate_unusable_password(),
                display_name=_display_name(identity.first_name, identity.last_name),
                first_name=identity.first_name.strip(),
                last_name=identity.last_name.strip(),
                social_id=identity.social_id,
                roles=frozenset({DEFAULT_CLIENT_ROLE}),
            )
        )
        logger.info("Created client %s from social identity", record.id)
        return await self._assembler.assemble(record)

    async def sign_in_with_provider(
        self, verifier: IIdentityVerifier, credentials: str
    ) -> AuthResult:
        """Verify provider credentials, find or create the client, issue a token."""
        identity = await verifier.verify(credentials)
        profile = await self.validate_social_identity(identity)
        return AuthResult(
            access_token=self._token_for(profile.user_id, profile.email),
            profile=profile,
        )

    async def get_profile(self, client_id: str) -> ProfileView:
        """Return the client's profile. Raises ClientNotFoundException."""
        record = await self._profiles.find_by_id(client_id)
        return await self._assembler.assemble(record)

    async def update_profile(self, client_id: str, data: ProfileUpdate) -> ProfileView:
        """Apply a partial update and return the new profile.

        Raises:
            ValidationException: If nothing is supplied or a field is invalid.
            EmailAlreadyExistsException: If the new email is taken.
            ClientNotFoundException: If the client does not exist.
        """
        if data.is_empty():
            raise ValidationException("At least one field must be supplied")
        if data.password is not None and not data.password:
            raise ValidationException("Password must not be empty", field="password")
        if data.email is not None:
            data = ProfileUpdate(
                email=_normalize_email(data.email),
                display_name=data.display_name,
                first_name=data.first_name,
                last_name=data.last_name,
                password=data.password,
            )
        record = await self._profiles.update(client_id, data)
        return await self._assembler.assemble(record)

    async def _read_picture(self, stream: BinaryIO, content_type: str) -> BinaryIO:
        """Enforce the upload policy; return a stream over the accepted bytes."""
        ct = (content_type or "").split(";")[0].strip().lower()
        if ct not in self._picture_types:
            raise ValidationException(
                f"Unsupported picture type: {content_type or 'none'}",
                field="content_type",
            )
        data = await asyncio.to_thread(stream.read, self._max_picture_size + 1)
        if len(data) > self._max_picture_size:
            raise ValidationException(
                f"Picture exceeds {self._max_picture_size} bytes", field="file"
            )
        if not data:
            raise ValidationException("Picture is empty", field="file")
        return io.BytesIO(data)

    async def set_picture(
        self,
        client_id: str,
        stream: BinaryIO,
        content_type: str,
        filename: str,
    ) -> str:
        """Store a new picture, release the old one, point the record at the new one.

        Returns the new media object id.

        Raises:
            ClientNotFoundException: If the client does not exist.
            ValidationException: If the upload violates the picture policy.
            StorageUploadError: If the picture cannot be stored.
        """
        record = await self._profiles.find_by_id(client_id)
        accepted = await self._read_picture(stream, content_type)
        new_id = await self._media.store(accepted, content_type, filename)
        old_id = record.media_id
        if record.picture_slot is PictureSlot.HAS_CUSTOM_IMAGE and old_id:
            if not await self._media.delete(old_id):
                logger.warning(
                    "Old picture %s of client %s was not deleted", old_id, client_id
                )
        await self._profiles.set_image(client_id, new_id)
        logger.info("Client %s picture set to %s", client_id, new_id)
        return new_id

    async def delete_picture(self, client_id: str) -> bool:
        """Reset the picture to the placeholder; return whether the media delete succeeded.

        The record is reset even when the delete fails.
        """
        record = await self._profiles.find_by_id(client_id)
        if record.picture_slot is PictureSlot.NO_CUSTOM_IMAGE:
            return True
        deleted = await self._media.delete(record.image)
        await self._profiles.set_image(client_id, DEFAULT_AVATAR_URL)
        if not deleted:
            logger.warning(
                "Picture %s of client %s was not deleted; record reset anyway",
                record.image,
                client_id,
            )
        return deleted

    async def delete_account(self, client_id: str) -> bool:
        """Delete the client's picture and record; False if the client does not exist."""
        try:
            record = await self._profiles.find_by_id(client_id)
        except ClientNotFoundException:
            return False
        if record.media_id is not None:
            if not await self._media.delete(record.media_id):
                logger.warning(
                    "Picture %s of deleted client %s was not removed",
                    record.media_id,
                    client_id,
                )
        removed = await self._profiles.delete(client_id)
        if removed:
            logger.info("Deleted account %s", client_id)
        return removed
