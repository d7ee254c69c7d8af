"""Firestore-backed repository implementations."""

from app.infrastructure.firebase.repositories.client_repo_firestore import (
    FirestoreClientRepository,
)

__all__ = [
    "FirestoreClientRepository",
]
