"""Client domain entity.

Represents a persisted client identity/profile, independent of the document
store it lives in.
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.core.constants import DEFAULT_AVATAR_URL
from app.domain.enums import PictureSlot
from app.domain.exceptions import ValidationException


@dataclass
class ClientRecord:
    """Domain entity for a client record.

    password_hash and password_salt only travel between the credential
    manager and the profile store; views are built without them.
    """

    id: str
    email: str
    display_name: str
    first_name: str
    last_name: str
    password_hash: str = field(repr=False)
    password_salt: str = field(repr=False)
    social_id: str | None = None
    image: str = DEFAULT_AVATAR_URL
    is_admin: bool = False
    roles: frozenset[str] = frozenset()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate record invariants. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Client ID is required", field="id")
        if not self.email:
            raise ValidationException("Client email is required", field="email")
        if not self.image:
            raise ValidationException("Client image reference is required", field="image")

    @property
    def picture_slot(self) -> PictureSlot:
        """Current state of the profile-picture slot."""
        if self.image == DEFAULT_AVATAR_URL:
            return PictureSlot.NO_CUSTOM_IMAGE
        return PictureSlot.HAS_CUSTOM_IMAGE

    @property
    def media_id(self) -> str | None:
        """Referenced media object id, or None when the placeholder is set."""
        if self.picture_slot is PictureSlot.HAS_CUSTOM_IMAGE:
            return self.image
        return None
