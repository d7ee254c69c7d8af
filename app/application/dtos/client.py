"""DTOs for client identity and profile use cases (no dependency on the store)."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegistrationInput:
    """Public registration request (email is the login key)."""

    email: str
    password: str = field(repr=False)
    first_name: str = ""
    last_name: str = ""


@dataclass(frozen=True)
class ClientCreate:
    """Normalized input for ProfileStore.create. Password is plain; the store hashes it."""

    email: str
    password: str = field(repr=False)
    display_name: str
    first_name: str
    last_name: str
    social_id: str | None = None
    is_admin: bool = False
    roles: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ProfileUpdate:
    """Partial profile update. None means "leave unchanged".

    The image reference is not updatable here; it only changes through
    set_picture/delete_picture.
    """

    email: str | None = None
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    password: str | None = field(default=None, repr=False)

    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (
                self.email,
                self.display_name,
                self.first_name,
                self.last_name,
                self.password,
            )
        )


@dataclass(frozen=True)
class ImageResolution:
    """Outcome of resolving a record's image reference.

    Exactly one of value (placeholder URL or data URL) and error_code is set.
    """

    value: str | None = None
    error_code: str | None = None

    @classmethod
    def resolved(cls, value: str) -> ImageResolution:
        return cls(value=value)

    @classmethod
    def failed(cls, error_code: str) -> ImageResolution:
        return cls(error_code=error_code)

    @property
    def ok(self) -> bool:
        return self.error_code is None


@dataclass(frozen=True)
class ProfileView:
    """Externally visible profile. Never carries password hash or salt."""

    social_id: str | None
    user_id: str
    email: str
    display_name: str
    first_name: str
    last_name: str
    image: ImageResolution
    is_admin: bool
    roles: frozenset[str]


@dataclass(frozen=True)
class TokenClaims:
    """Claims embedded in an issued bearer token."""

    subject_id: str
    username: str

    def to_payload(self) -> dict[str, str]:
        return {"sub": self.subject_id, "username": self.username}


@dataclass(frozen=True)
class AuthResult:
    """Issued bearer token plus the profile it was issued for."""

    access_token: str = field(repr=False)
    profile: ProfileView


@dataclass(frozen=True)
class VerifiedIdentity:
    """Normalized identity returned by a third-party identity verifier."""

    social_id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    picture_url: str | None = None
