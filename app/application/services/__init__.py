"""Application services: client lifecycle facade, profile assembly, media reconciliation."""

from app.application.services.client_lifecycle import ClientLifecycle
from app.application.services.media_reconciliation import MediaReconciler
from app.application.services.profile_assembler import ProfileAssembler

__all__ = [
    "ClientLifecycle",
    "MediaReconciler",
    "ProfileAssembler",
]
