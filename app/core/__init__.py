"""Core: config, constants, and application bootstrap.

Single place for settings and shared constants.
"""

from app.core.config import Settings, get_settings
from app.core.constants import DEFAULT_AVATAR_URL

__all__ = ["DEFAULT_AVATAR_URL", "Settings", "get_settings"]
