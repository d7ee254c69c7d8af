"""Domain entities and aggregates.

Pure domain models; no persistence concerns.
"""

from app.domain.entities.client import ClientRecord

__all__ = ["ClientRecord"]
