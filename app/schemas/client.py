"""Client API schemas."""

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.application.dtos.client import AuthResult, ProfileView


class RegisterRequest(BaseModel):
    """Request body for public registration (email is the login key)."""

    email: EmailStr = Field(...)
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)


class LoginRequest(BaseModel):
    """Request body for email/password login."""

    email: EmailStr = Field(...)
    password: str = Field(..., min_length=1)


class SocialLoginRequest(BaseModel):
    """Request body for sign-in with a provider access token."""

    access_token: str = Field(..., min_length=1, description="Provider OAuth access token")


class ProfileUpdateRequest(BaseModel):
    """Request body for PATCH /me. Omitted fields are left unchanged."""

    email: EmailStr | None = None
    display_name: str | None = Field(default=None, max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    password: str | None = Field(
        default=None, min_length=6, description="New password (min 6 characters)"
    )

    @model_validator(mode="after")
    def at_least_one_field(self) -> "ProfileUpdateRequest":
        if not self.model_fields_set:
            raise ValueError("at least one field must be supplied")
        return self


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    """Client profile. image_error is set (and image is null) when the picture cannot be read."""

    user_id: str
    social_id: str | None = None
    email: str
    display_name: str
    first_name: str
    last_name: str
    image: str | None = None
    image_error: str | None = None
    is_admin: bool = False
    roles: list[str] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: ProfileView) -> "ProfileResponse":
        return cls(
            user_id=view.user_id,
            social_id=view.social_id,
            email=view.email,
            display_name=view.display_name,
            first_name=view.first_name,
            last_name=view.last_name,
            image=view.image.value,
            image_error=view.image.error_code,
            is_admin=view.is_admin,
            roles=sorted(view.roles),
        )


class AuthResponse(TokenResponse):
    """Token plus the profile it was issued for."""

    profile: ProfileResponse

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(
            access_token=result.access_token,
            profile=ProfileResponse.from_view(result.profile),
        )


class PictureResponse(BaseModel):
    """Response for PUT /me/picture."""

    media_id: str


class DeleteResultResponse(BaseModel):
    """Outcome of a best-effort delete."""

    deleted: bool
