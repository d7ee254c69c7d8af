"""DTOs for the chunked media store and its reconciliation sweep."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class MediaMetadata:
    """Metadata document of a stored media object."""

    id: str
    filename: str
    length: int
    chunk_size: int
    upload_date: datetime
    content_type: str

    @property
    def chunk_count(self) -> int:
        """Number of chunks the object must have (0 for empty content)."""
        if self.length == 0:
            return 0
        return -(-self.length // self.chunk_size)


@dataclass(frozen=True)
class DanglingReference:
    """A client record whose image id has no live media object."""

    client_id: str
    media_id: str


@dataclass
class ReconciliationReport:
    """Result of one orphan/dangling-reference sweep."""

    dry_run: bool
    orphaned_media: list[str] = field(default_factory=list)
    deleted_media: list[str] = field(default_factory=list)
    skipped_recent_media: list[str] = field(default_factory=list)
    dangling_records: list[DanglingReference] = field(default_factory=list)
    reset_records: list[str] = field(default_factory=list)
