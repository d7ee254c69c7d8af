"""Media storage: chunked binary object store on Firestore.

Implementations satisfy app.application.interfaces.IMediaStore (store,
open_download_stream, read_as_data_url, delete, metadata, list_objects).
"""

from app.infrastructure.external.storage.chunked_media_store import ChunkedMediaStore
from app.infrastructure.external.storage.factory import MediaStoreFactory

__all__ = [
    "ChunkedMediaStore",
    "MediaStoreFactory",
]
