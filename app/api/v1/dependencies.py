"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the client lifecycle facade and bearer
authentication. The facade and its collaborators are built from
infrastructure implementations here; routes depend only on these
dependencies, not on infra directly.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.services.client_lifecycle import ClientLifecycle
from app.application.services.profile_assembler import ProfileAssembler
from app.core.config import get_settings
from app.infrastructure.external.identity import GoogleIdentityVerifier
from app.infrastructure.external.storage import ChunkedMediaStore, MediaStoreFactory
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase.client import get_firestore_client
from app.infrastructure.firebase.repositories import FirestoreClientRepository
from app.infrastructure.security import CredentialManager, JWTTokenIssuer, verify_token

_http_bearer = HTTPBearer(auto_error=False)


def _get_firestore_client_or_raise() -> FirestoreRESTClient:
    """Return Firestore client or raise HTTPException 503 with standard message."""
    client = get_firestore_client()
    if not client:
        raise HTTPException(
            status_code=503,
            detail="Firestore not configured (set FIREBASE_SERVICE_ACCOUNT_KEY or PATH)",
        )
    return client


@lru_cache
def get_credential_manager() -> CredentialManager:
    """Credential manager with the JWT issuer (one per process, keeps its dummy hash)."""
    settings = get_settings()
    return CredentialManager(JWTTokenIssuer(settings), rounds=settings.bcrypt_rounds)


def get_media_store(
    client: Annotated[FirestoreRESTClient, Depends(_get_firestore_client_or_raise)],
) -> ChunkedMediaStore:
    """Chunked profile-picture store on the shared Firestore client."""
    return MediaStoreFactory.create_media_store(client, get_settings())


def get_client_repo(
    client: Annotated[FirestoreRESTClient, Depends(_get_firestore_client_or_raise)],
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
) -> FirestoreClientRepository:
    """Firestore client profile store."""
    return FirestoreClientRepository(client, credentials)


def get_client_lifecycle(
    profiles: Annotated[FirestoreClientRepository, Depends(get_client_repo)],
    media: Annotated[ChunkedMediaStore, Depends(get_media_store)],
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
) -> ClientLifecycle:
    """Client lifecycle facade (all collaborators passed explicitly)."""
    return ClientLifecycle(
        profiles=profiles,
        media=media,
        credentials=credentials,
        assembler=ProfileAssembler(media),
        settings=get_settings(),
    )


def get_google_verifier(request: Request) -> GoogleIdentityVerifier:
    """Google verifier on the shared identity HTTP client (created in lifespan)."""
    return GoogleIdentityVerifier(
        userinfo_url=get_settings().google_userinfo_url,
        http_client=getattr(request.app.state, "identity_http_client", None),
    )


async def get_current_client_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str:
    """Return the authenticated client id (JWT sub); 401 if missing or invalid."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    return str(payload["sub"])


CurrentClientId = Annotated[str, Depends(get_current_client_id)]
Lifecycle = Annotated[ClientLifecycle, Depends(get_client_lifecycle)]
