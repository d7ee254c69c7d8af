"""Application lifespan: startup and shutdown.

Only wiring of infrastructure (Firestore client, shared HTTP client for
identity providers, telemetry); no business logic.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.firebase import close_firebase, init_firebase

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: Firestore client, identity HTTP client, telemetry (if
    enabled). Shutdown order: identity HTTP client, telemetry, Firestore.
    """
    settings = get_settings()

    # ---- Startup ----
    if not init_firebase():
        logger.warning("Firestore not initialized; client endpoints will answer 503")

    # Shared HTTP client for identity-provider calls (connection reuse).
    app.state.identity_http_client = httpx.AsyncClient(timeout=10.0)

    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    if getattr(app.state, "identity_http_client", None) is not None:
        await app.state.identity_http_client.aclose()
        app.state.identity_http_client = None
        logger.info("Identity HTTP client closed")

    from app.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    await close_firebase()
