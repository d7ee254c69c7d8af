"""Application DTOs (no store dependency)."""

from app.application.dtos.client import (
    AuthResult,
    ClientCreate,
    ImageResolution,
    ProfileUpdate,
    ProfileView,
    RegistrationInput,
    TokenClaims,
    VerifiedIdentity,
)
from app.application.dtos.media import (
    DanglingReference,
    MediaMetadata,
    ReconciliationReport,
)

__all__ = [
    "AuthResult",
    "ClientCreate",
    "DanglingReference",
    "ImageResolution",
    "MediaMetadata",
    "ProfileUpdate",
    "ProfileView",
    "ReconciliationReport",
    "RegistrationInput",
    "TokenClaims",
    "VerifiedIdentity",
]
