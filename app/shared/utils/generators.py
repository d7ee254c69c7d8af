"""ID and secret generators (CUID2 document ids, throwaway passwords)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Used for client and media object ids.

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_unusable_password() -> str:
    """Return a random password nobody knows (accounts created via social sign-in)."""
    return secrets.token_urlsafe(48)
