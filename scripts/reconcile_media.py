"""Reconcile profile pictures: delete orphaned media, report dangling references.

Usage:
    python -m scripts.reconcile_media [--dry-run] [--reset-dangling]

--dry-run          report only; nothing is deleted or reset
--reset-dangling   reset clients whose picture no longer exists to the placeholder

Unreferenced media younger than MEDIA_ORPHAN_GRACE_MINUTES is left alone.
Requires FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH.
"""

import asyncio
import sys
from datetime import timedelta

from app.application.services.media_reconciliation import MediaReconciler
from app.core.config import get_settings
from app.infrastructure.external.storage import MediaStoreFactory
from app.infrastructure.firebase import close_firebase, get_firestore_client, init_firebase
from app.infrastructure.firebase.repositories import FirestoreClientRepository
from app.infrastructure.security import CredentialManager, JWTTokenIssuer
from app.shared.telemetry.logging import setup_logging

_USAGE = "usage: python -m scripts.reconcile_media [--dry-run] [--reset-dangling]"


async def main() -> None:
    """Run one reconciliation sweep and print a summary."""
    args = set(sys.argv[1:])
    unknown = args - {"--dry-run", "--reset-dangling"}
    if unknown:
        print(f"Unknown arguments: {' '.join(sorted(unknown))}", file=sys.stderr)
        print(_USAGE, file=sys.stderr)
        sys.exit(2)

    settings = get_settings()
    setup_logging()
    if not init_firebase():
        print("Firestore not configured", file=sys.stderr)
        sys.exit(1)
    client = get_firestore_client()
    try:
        credentials = CredentialManager(
            JWTTokenIssuer(settings), rounds=settings.bcrypt_rounds
        )
        reconciler = MediaReconciler(
            FirestoreClientRepository(client, credentials),
            MediaStoreFactory.create_media_store(client, settings),
            grace=timedelta(minutes=settings.media_orphan_grace_minutes),
        )
        report = await reconciler.run(
            dry_run="--dry-run" in args,
            reset_dangling="--reset-dangling" in args,
        )
    finally:
        await close_firebase()

    mode = "dry run" if report.dry_run else "applied"
    print(f"Media reconciliation ({mode})")
    print(f"  orphaned media:       {len(report.orphaned_media)}")
    print(f"  deleted media:        {len(report.deleted_media)}")
    print(f"  skipped (too recent): {len(report.skipped_recent_media)}")
    print(f"  dangling records:     {len(report.dangling_records)}")
    print(f"  reset records:        {len(report.reset_records)}")
    for ref in report.dangling_records:
        print(f"    client {ref.client_id} -> missing media {ref.media_id}")


if __name__ == "__main__":
    asyncio.run(main())
