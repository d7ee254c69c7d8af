"""Reconciliation sweep between client image references and stored media.

Recovers from interrupted picture transitions:
- media objects no client references (older than the grace period) are deleted;
- clients that reference a missing media object are reported and, on request,
  reset to the placeholder image.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from app.application.dtos.media import DanglingReference, ReconciliationReport
from app.application.interfaces.repositories import IClientRepository
from app.application.interfaces.services import IMediaStore
from app.core.constants import DEFAULT_AVATAR_URL
from app.domain.exceptions import ClientNotFoundException
from app.infrastructure.exceptions import MediaNotFoundError
from app.shared.telemetry.tracing import add_span_attributes, traced
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class MediaReconciler:
    """Compares records' image ids against live media ids."""

    def __init__(
        self,
        profiles: IClientRepository,
        media: IMediaStore,
        grace: timedelta = timedelta(minutes=60),
    ) -> None:
        self._profiles = profiles
        self._media = media
        self._grace = grace

    @traced("media.reconcile")
    async def run(
        self, *, dry_run: bool = False, reset_dangling: bool = False
    ) -> ReconciliationReport:
        """Run one sweep.

        Records are listed before media, so any media id a record references
        was stored before the media listing began. Media stored after the
        record listing looks unreferenced and is protected by the grace period.

        Args:
            dry_run: Report only; delete and reset nothing.
            reset_dangling: Reset records pointing at missing media.

        Returns:
            ReconciliationReport describing what was found and changed.
        """
        report = ReconciliationReport(dry_run=dry_run)

        references: dict[str, list[str]] = {}
        async for client_id, image in self._profiles.iter_image_refs():
            if image != DEFAULT_AVATAR_URL:
                references.setdefault(image, []).append(client_id)

        cutoff = utc_now() - self._grace
        live: set[str] = set()
        async for meta in self._media.list_objects():
            live.add(meta.id)
            if meta.id in references:
                continue
            if meta.upload_date > cutoff:
                report.skipped_recent_media.append(meta.id)
                continue
            report.orphaned_media.append(meta.id)
            if not dry_run and await self._media.delete(meta.id):
                report.deleted_media.append(meta.id)

        for media_id, client_ids in references.items():
            if media_id in live:
                continue
            for client_id in client_ids:
                report.dangling_records.append(DanglingReference(client_id, media_id))
                if dry_run or not reset_dangling:
                    continue
                if await self._reset_if_still_dangling(client_id, media_id):
                    report.reset_records.append(client_id)

        add_span_attributes(
            count=len(report.orphaned_media) + len(report.dangling_records),
            dry_run=dry_run,
            reset_dangling=reset_dangling,
        )
        logger.info(
            "Media reconciliation: %d orphaned (%d deleted, %d recent), "
            "%d dangling (%d reset), dry_run=%s",
            len(report.orphaned_media),
            len(report.deleted_media),
            len(report.skipped_recent_media),
            len(report.dangling_records),
            len(report.reset_records),
            dry_run,
        )
        return report

    async def _reset_if_still_dangling(self, client_id: str, media_id: str) -> bool:
        try:
            await self._media.metadata(media_id)
            return False
        except MediaNotFoundError:
            pass
        try:
            record = await self._profiles.find_by_id(client_id)
        except ClientNotFoundException:
            return False
        if record.image != media_id:
            return False
        await self._profiles.set_image(client_id, DEFAULT_AVATAR_URL)
        logger.warning(
            "Reset client %s image: media %s no longer exists", client_id, media_id
        )
        return True
