"""Pydantic request/response schemas for the API."""

from app.schemas.client import (
    AuthResponse,
    DeleteResultResponse,
    LoginRequest,
    PictureResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    SocialLoginRequest,
    TokenResponse,
)
from app.schemas.health import HealthResponse, ReadinessResponse

__all__ = [
    "AuthResponse",
    "DeleteResultResponse",
    "HealthResponse",
    "LoginRequest",
    "PictureResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "ReadinessResponse",
    "RegisterRequest",
    "SocialLoginRequest",
    "TokenResponse",
]
