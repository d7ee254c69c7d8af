"""Core constants: shared literal values.

Single source of truth for values that must be identical across records
(e.g. the placeholder avatar URL).
"""

# Placeholder image for clients without a custom picture. Every record with no
# custom image stores exactly this value.
DEFAULT_AVATAR_URL = (
    "https://www.gravatar.com/avatar/00000000000000000000000000000000?d=mp&f=y"
)

# Role tag assigned to every new client.
DEFAULT_CLIENT_ROLE = "user"

# Profile picture upload policy defaults (overridable through settings).
DEFAULT_MAX_PICTURE_SIZE = 5 * 1024 * 1024  # 5MB
DEFAULT_PICTURE_TYPES = frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"})
