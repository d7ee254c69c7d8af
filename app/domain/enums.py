"""Domain enumerations for the Clientele application.

Enums represent fixed sets of domain values (e.g. profile-picture slot state).
"""

from enum import Enum


class PictureSlot(str, Enum):
    """State of a client's profile-picture slot.

    NO_CUSTOM_IMAGE: image is the placeholder avatar URL.
    HAS_CUSTOM_IMAGE: image is the id of a stored media object.
    """

    NO_CUSTOM_IMAGE = "no_custom_image"
    HAS_CUSTOM_IMAGE = "has_custom_image"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid slot values as strings."""
        return [s.value for s in cls]
