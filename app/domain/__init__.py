"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import ClientRecord
from app.domain.enums import PictureSlot
from app.domain.exceptions import (
    AuthenticationException,
    ClienteleException,
    ClientNotFoundException,
    CredentialException,
    EmailAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import EmailAddress

__all__ = [
    # Entities
    "ClientRecord",
    # Enums
    "PictureSlot",
    # Exceptions
    "AuthenticationException",
    "ClienteleException",
    "ClientNotFoundException",
    "CredentialException",
    "EmailAlreadyExistsException",
    "ResourceNotFoundException",
    "ValidationException",
    # Value objects
    "EmailAddress",
]
