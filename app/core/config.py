"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (SECRET_KEY and the Firestore service
account) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.constants import DEFAULT_MAX_PICTURE_SIZE, DEFAULT_PICTURE_TYPES


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (secret_key and the Firestore credentials).
    """

    # App
    app_name: str = "clientele"
    app_version: str = "1.0.0"
    debug: bool = False

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours
    bcrypt_rounds: int = 10

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Profile pictures (chunked media store)
    media_collection_prefix: str = "profile_pictures"
    media_chunk_size: int = 255 * 1024  # stays well under Firestore's 1 MiB document limit
    max_picture_size: int = DEFAULT_MAX_PICTURE_SIZE
    allowed_picture_types: str = ",".join(sorted(DEFAULT_PICTURE_TYPES))
    # Unreferenced media younger than this is left alone by the reconciliation sweep.
    media_orphan_grace_minutes: int = 60

    # Social sign-in
    google_userinfo_url: str = "https://openidconnect.googleapis.com/v1/userinfo"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and media limits.

        - SECRET_KEY is always required (JWT signing).
        - FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH is required.
        """
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        has_key = (
            self.firebase_service_account_key
            and self.firebase_service_account_key.get_secret_value()
        )
        if not has_key and not self.firebase_service_account_path:
            raise ValueError(
                "Set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
            )
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError(
                f"bcrypt_rounds must be between 4 and 31, got: {self.bcrypt_rounds}"
            )
        if self.media_chunk_size <= 0 or self.media_chunk_size > 900 * 1024:
            raise ValueError(
                "media_chunk_size must be positive and at most 900KB "
                "(Firestore documents are limited to 1 MiB)."
            )
        return self

    @property
    def allowed_picture_type_set(self) -> frozenset[str]:
        """Allowed picture MIME types as a normalized set."""
        return frozenset(
            t.strip().lower() for t in self.allowed_picture_types.split(",") if t.strip()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
