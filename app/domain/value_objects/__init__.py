"""Domain value objects (immutable, self-validating)."""

from app.domain.value_objects.core import EmailAddress

__all__ = ["EmailAddress"]
