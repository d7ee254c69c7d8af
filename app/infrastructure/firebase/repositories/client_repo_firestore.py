"""Firestore-backed client profile store (implements IClientRepository)."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import AsyncIterator
from datetime import timedelta
from typing import Any

from app.application.dtos.client import ClientCreate, ProfileUpdate
from app.application.interfaces.services import ICredentialManager
from app.core.constants import DEFAULT_AVATAR_URL
from app.domain.entities.client import ClientRecord
from app.domain.exceptions import (
    ClientNotFoundException,
    EmailAlreadyExistsException,
    ValidationException,
)
from app.domain.value_objects.core import EmailAddress
from app.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)
from app.infrastructure.firebase.collections import (
    COLLECTION_CLIENT_EMAILS,
    COLLECTION_CLIENTS,
)
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

# A claim whose owner record is missing or holds another email is only
# taken over after this long.
_STALE_CLAIM_AGE = timedelta(minutes=5)


def _email_doc_id(email: str) -> str:
    """Firestore document ID for an email claim (emails may contain '/')."""
    return hashlib.sha256(email.encode("utf-8")).hexdigest()


def _normalize_email(email: str) -> str:
    try:
        return EmailAddress(email).value
    except ValueError as e:
        raise ValidationException(str(e), field="email") from e


class FirestoreClientRepository:
    """Client profile store on Firestore.

    Email uniqueness is enforced by a claim document keyed by the email hash,
    written with create-if-absent before the record itself. Record updates are
    single-document PATCHes with an exists precondition.
    """

    def __init__(
        self, client: FirestoreRESTClient, credentials: ICredentialManager
    ) -> None:
        self._client = client
        self._credentials = credentials
        self._coll = client.collection(COLLECTION_CLIENTS)
        self._emails = client.collection(COLLECTION_CLIENT_EMAILS)

    def _to_record(self, doc_id: str, data: dict[str, Any]) -> ClientRecord:
        return ClientRecord(
            id=doc_id,
            email=data.get("email", ""),
            display_name=data.get("display_name", ""),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            password_hash=data.get("password_hash", ""),
            password_salt=data.get("password_salt", ""),
            social_id=data.get("social_id"),
            image=data.get("image") or DEFAULT_AVATAR_URL,
            is_admin=bool(data.get("is_admin", False)),
            roles=frozenset(data.get("roles") or ()),
            created_at=ensure_utc(data.get("created_at")),
            updated_at=ensure_utc(data.get("updated_at")),
        )

    async def _claim_email(self, email: str, client_id: str) -> None:
        """Claim email for client_id; raise EmailAlreadyExistsException if taken."""
        key = _email_doc_id(email)
        claim = {"client_id": client_id, "email": email, "created_at": utc_now()}
        try:
            await self._emails.create(key, claim)
            return
        except DocumentExistsError:
            pass
        existing = await self._emails.document(key).get()
        if existing is not None:
            owner = existing.to_dict().get("client_id")
            claimed_at = ensure_utc(existing.to_dict().get("created_at"))
            owner_doc = await self._coll.document(owner).get() if owner else None
            if owner_doc is not None and owner_doc.to_dict().get("email") == email:
                raise EmailAlreadyExistsException()
            if claimed_at is not None and utc_now() - claimed_at < _STALE_CLAIM_AGE:
                raise EmailAlreadyExistsException()
            logger.warning("Taking over stale email claim left by client %s", owner)
        await self._emails.document(key).set(claim)

    async def _release_email(self, email: str, client_id: str) -> None:
        """Delete the email claim if it still belongs to client_id."""
        ref = self._emails.document(_email_doc_id(email))
        claim = await ref.get()
        if claim is not None and claim.to_dict().get("client_id") == client_id:
            await ref.delete()

    async def create(self, data: ClientCreate) -> ClientRecord:
        """Persist a new record; raise EmailAlreadyExistsException if the email is taken."""
        email = _normalize_email(data.email)
        password_hash, password_salt = await self._credentials.hash(data.password)
        client_id = generate_cuid()
        await self._claim_email(email, client_id)
        now = utc_now()
        doc: dict[str, Any] = {
            "email": email,
            "display_name": data.display_name,
            "first_name": data.first_name,
            "last_name": data.last_name,
            "password_hash": password_hash,
            "password_salt": password_salt,
            "social_id": data.social_id,
            "image": DEFAULT_AVATAR_URL,
            "is_admin": data.is_admin,
            "roles": data.roles,
            "created_at": now,
            "updated_at": now,
        }
        try:
            await self._coll.create(client_id, doc)
        except Exception:
            await self._release_email(email, client_id)
            raise
        logger.info("Created client %s", client_id)
        return self._to_record(client_id, doc)

    async def find_by_id(self, client_id: str) -> ClientRecord:
        """Return record by ID."""
        if not client_id or "/" in client_id:
            raise ClientNotFoundException(client_id)
        doc = await self._coll.document(client_id).get()
        if not doc:
            raise ClientNotFoundException(client_id)
        return self._to_record(doc.id, doc.to_dict())

    async def find_by_email(self, email: str) -> ClientRecord:
        """Return record by email (via the uniqueness claim)."""
        try:
            normalized = EmailAddress(email).value
        except ValueError:
            raise ClientNotFoundException(email, key="email") from None
        claim = await self._emails.document(_email_doc_id(normalized)).get()
        if claim is None:
            raise ClientNotFoundException(normalized, key="email")
        owner = claim.to_dict().get("client_id", "")
        try:
            record = await self.find_by_id(owner)
        except ClientNotFoundException:
            raise ClientNotFoundException(normalized, key="email") from None
        if record.email != normalized:
            raise ClientNotFoundException(normalized, key="email")
        return record

    async def find_by_social_id(self, social_id: str) -> ClientRecord:
        """Return the record linked to a third-party identity (server-side where query)."""
        q = self._coll.where("social_id", "==", social_id).limit(1)
        async for snapshot in q.stream():
            return self._to_record(snapshot.id, snapshot.to_dict())
        raise ClientNotFoundException(social_id, key="social_id")

    async def _apply(self, client_id: str, updates: dict[str, Any]) -> ClientRecord:
        updates["updated_at"] = utc_now()
        if not client_id or "/" in client_id:
            raise ClientNotFoundException(client_id)
        snapshot = await self._coll.document(client_id).update(updates)
        if snapshot is None:
            raise ClientNotFoundException(client_id)
        return self._to_record(snapshot.id, snapshot.to_dict())

    async def update(self, client_id: str, data: ProfileUpdate) -> ClientRecord:
        """Merge only supplied fields; return the post-update record.

        An email change claims the new address before the record is written and
        releases the old claim afterwards.
        """
        updates: dict[str, Any] = {}
        if data.display_name is not None:
            updates["display_name"] = data.display_name
        if data.first_name is not None:
            updates["first_name"] = data.first_name
        if data.last_name is not None:
            updates["last_name"] = data.last_name
        if data.password is not None:
            password_hash, password_salt = await self._credentials.hash(data.password)
            updates["password_hash"] = password_hash
            updates["password_salt"] = password_salt

        old_email: str | None = None
        if data.email is not None:
            new_email = _normalize_email(data.email)
            current = await self.find_by_id(client_id)
            if new_email != current.email:
                await self._claim_email(new_email, client_id)
                updates["email"] = new_email
                old_email = current.email

        try:
            record = await self._apply(client_id, updates)
        except Exception:
            if "email" in updates:
                await self._release_email(updates["email"], client_id)
            raise
        if old_email is not None:
            await self._release_email(old_email, client_id)
        return record

    async def set_image(self, client_id: str, image: str) -> ClientRecord:
        """Replace the image reference (placeholder URL or media id)."""
        return await self._apply(client_id, {"image": image})

    async def link_social_id(self, client_id: str, social_id: str) -> ClientRecord:
        """Attach a third-party identity to an existing record."""
        return await self._apply(client_id, {"social_id": social_id})

    async def delete(self, client_id: str) -> bool:
        """Remove the record and its email claim; False if it did not exist."""
        try:
            record = await self.find_by_id(client_id)
        except ClientNotFoundException:
            return False
        if not await self._coll.document(client_id).delete(must_exist=True):
            return False
        await self._release_email(record.email, client_id)
        logger.info("Deleted client %s", client_id)
        return True

    async def iter_image_refs(self) -> AsyncIterator[tuple[str, str]]:
        """Yield (client_id, image) for every record."""
        async for snapshot in self._coll.stream():
            yield snapshot.id, snapshot.to_dict().get("image") or DEFAULT_AVATAR_URL
