"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import IClientRepository
from app.application.interfaces.services import (
    ICredentialManager,
    IIdentityVerifier,
    IMediaStore,
    ITokenIssuer,
)

__all__ = [
    "IClientRepository",
    "ICredentialManager",
    "IIdentityVerifier",
    "IMediaStore",
    "ITokenIssuer",
]
