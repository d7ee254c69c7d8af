"""Application layer: interfaces, DTOs, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (profile store, media store,
credential manager, identity verifiers).
"""

from app.application.interfaces import (
    IClientRepository,
    ICredentialManager,
    IIdentityVerifier,
    IMediaStore,
    ITokenIssuer,
)
from app.application.services import ClientLifecycle, MediaReconciler, ProfileAssembler

__all__ = [
    "ClientLifecycle",
    "IClientRepository",
    "ICredentialManager",
    "IIdentityVerifier",
    "IMediaStore",
    "ITokenIssuer",
    "MediaReconciler",
    "ProfileAssembler",
]
