"""Pytest configuration and fixtures for clientele.

Required settings are put in the environment before app.main is imported.
Firestore is replaced by the in-memory double from tests.fakes; API tests
override the lifecycle dependency so no network or credentials are needed.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("FIREBASE_SERVICE_ACCOUNT_KEY", "{}")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.api.v1.dependencies import get_client_lifecycle  # noqa: E402
from app.application.services.client_lifecycle import ClientLifecycle  # noqa: E402
from app.core.config import Settings, get_settings  # noqa: E402
from app.infrastructure.external.storage import ChunkedMediaStore  # noqa: E402
from app.infrastructure.firebase.repositories import (  # noqa: E402
    FirestoreClientRepository,
)
from app.infrastructure.security import CredentialManager, JWTTokenIssuer  # noqa: E402
from tests.fakes import FakeFirestore  # noqa: E402

get_settings.cache_clear()

from app.main import app  # noqa: E402

# Small chunks so a few bytes of test content span several chunk documents.
TEST_CHUNK_SIZE = 8


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def fake_firestore() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def credentials(settings: Settings) -> CredentialManager:
    """Real bcrypt at the minimum cost factor."""
    return CredentialManager(JWTTokenIssuer(settings), rounds=4)


@pytest.fixture
def client_repo(
    fake_firestore: FakeFirestore, credentials: CredentialManager
) -> FirestoreClientRepository:
    return FirestoreClientRepository(fake_firestore, credentials)


@pytest.fixture
def media_store(fake_firestore: FakeFirestore) -> ChunkedMediaStore:
    return ChunkedMediaStore(
        fake_firestore, prefix="profile_pictures", chunk_size=TEST_CHUNK_SIZE
    )


@pytest.fixture
def lifecycle(
    client_repo: FirestoreClientRepository,
    media_store: ChunkedMediaStore,
    credentials: CredentialManager,
    settings: Settings,
) -> ClientLifecycle:
    """Facade over the in-memory store with real bcrypt and JWT."""
    return ClientLifecycle(
        profiles=client_repo,
        media=media_store,
        credentials=credentials,
        settings=settings,
    )


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def api_client(client: AsyncClient, lifecycle: ClientLifecycle) -> AsyncClient:
    """HTTP client whose routes use the in-memory lifecycle."""
    app.dependency_overrides[get_client_lifecycle] = lambda: lifecycle
    try:
        yield client
    finally:
        app.dependency_overrides.clear()
