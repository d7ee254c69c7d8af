"""Chunked media store on Firestore (GridFS-style files + chunks collections).

Each object is one metadata document plus ordered chunk documents of at most
chunk_size bytes. Chunks are written before the metadata document, so an
object is only visible once all of its chunks exist.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import BinaryIO

import httpx

from app.application.dtos.media import MediaMetadata
from app.domain.exceptions import ValidationException
from app.infrastructure.exceptions import (
    MediaNotFoundError,
    StorageDownloadError,
    StorageUploadError,
)
from app.infrastructure.firebase._rest_client import (
    DocumentSnapshot,
    FirestoreRESTClient,
)
from app.infrastructure.firebase.collections import (
    media_chunks_collection,
    media_files_collection,
)
from app.shared.telemetry.tracing import add_span_attributes, traced
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 255 * 1024


def _read_full_chunk(stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes, looping over short reads until size or EOF."""
    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        data = stream.read(remaining)
        if not data:
            break
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


class ChunkedMediaStore:
    """Implements IMediaStore on two Firestore collections.

    {prefix}_files/{object_id}: filename, length, chunk_size, upload_date, content_type
    {prefix}_chunks/{object_id}-{n}: files_id, n, data

    Every read opens its own chunk sequence, so concurrent reads of the same
    object do not share state.
    """

    def __init__(
        self,
        client: FirestoreRESTClient,
        prefix: str = "profile_pictures",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._client = client
        self._files = client.collection(media_files_collection(prefix))
        self._chunks = client.collection(media_chunks_collection(prefix))
        self.chunk_size = chunk_size

    @staticmethod
    def _chunk_doc_id(object_id: str, n: int) -> str:
        return f"{object_id}-{n}"

    @staticmethod
    def _check_object_id(object_id: str) -> None:
        if not object_id or "/" in object_id:
            raise MediaNotFoundError(object_id)

    def _to_metadata(self, snapshot: DocumentSnapshot) -> MediaMetadata:
        d = snapshot.to_dict()
        return MediaMetadata(
            id=snapshot.id,
            filename=d.get("filename", ""),
            length=int(d.get("length", 0)),
            chunk_size=int(d.get("chunk_size", self.chunk_size)),
            upload_date=ensure_utc(d.get("upload_date")) or utc_now(),
            content_type=d.get("content_type") or "",
        )

    @traced("media.store")
    async def store(self, stream: BinaryIO, content_type: str, filename: str) -> str:
        """Store the stream's content and return the new object id.

        Raises:
            ValidationException: If content_type is empty.
            StorageUploadError: If any write fails; written chunks are removed.
        """
        if not content_type or not content_type.strip():
            raise ValidationException("Content type is required", field="content_type")
        object_id = generate_cuid()
        written = 0
        length = 0
        completed = False
        try:
            while True:
                data = _read_full_chunk(stream, self.chunk_size)
                if not data:
                    break
                await self._chunks.document(self._chunk_doc_id(object_id, written)).set(
                    {"files_id": object_id, "n": written, "data": data}
                )
                written += 1
                length += len(data)
            await self._files.document(object_id).set({
                "filename": filename,
                "length": length,
                "chunk_size": self.chunk_size,
                "upload_date": utc_now(),
                "content_type": content_type.strip(),
            })
            completed = True
        except Exception as e:
            raise StorageUploadError(filename, str(e)) from e
        finally:
            if not completed and written:
                await self._discard_chunks(object_id, written)
        add_span_attributes(**{"media.length": length, "media.chunks": written})
        logger.info(
            "Stored media %s (%d bytes, %d chunks, %s)",
            object_id,
            length,
            written,
            content_type,
        )
        return object_id

    @traced("media.metadata")
    async def metadata(self, object_id: str) -> MediaMetadata:
        """Return the object's metadata.

        Raises:
            MediaNotFoundError: If no metadata document exists.
            StorageDownloadError: If the store cannot be read.
        """
        self._check_object_id(object_id)
        try:
            snapshot = await self._files.document(object_id).get()
        except httpx.HTTPError as e:
            raise StorageDownloadError(object_id, str(e)) from e
        if snapshot is None:
            raise MediaNotFoundError(object_id)
        return self._to_metadata(snapshot)

    async def _iter_chunks(self, meta: MediaMetadata) -> AsyncIterator[bytes]:
        """Yield chunk payloads 0..n-1 in order, validating each one."""
        count = meta.chunk_count
        for n in range(count):
            try:
                snapshot = await self._chunks.document(
                    self._chunk_doc_id(meta.id, n)
                ).get()
            except httpx.HTTPError as e:
                raise StorageDownloadError(meta.id, f"chunk {n}: {e}") from e
            if snapshot is None:
                raise StorageDownloadError(meta.id, f"missing chunk {n} of {count}")
            data = snapshot.to_dict().get("data")
            if not isinstance(data, bytes):
                raise StorageDownloadError(meta.id, f"chunk {n} has no binary data")
            is_last = n == count - 1
            if not is_last and len(data) != meta.chunk_size:
                raise StorageDownloadError(
                    meta.id,
                    f"chunk {n} is {len(data)} bytes, expected {meta.chunk_size}",
                )
            yield data

    async def open_download_stream(self, object_id: str) -> AsyncIterator[bytes]:
        """Yield the object's chunks in stored order.

        Raises MediaNotFoundError before the first chunk if the object is unknown.
        """
        meta = await self.metadata(object_id)
        async with aclosing(self._iter_chunks(meta)) as chunks:
            async for chunk in chunks:
                yield chunk

    @traced("media.read_as_data_url")
    async def read_as_data_url(self, object_id: str) -> str:
        """Return data:<content_type>;base64,<payload> for the whole object.

        The buffer is assembled only after the last chunk has been read; any
        error or cancellation before that leaves nothing behind.

        Raises:
            MediaNotFoundError: If the object does not exist.
            StorageDownloadError: On I/O failure or an incomplete chunk sequence.
        """
        meta = await self.metadata(object_id)
        if not meta.content_type:
            raise StorageDownloadError(object_id, "metadata has no content type")
        chunks: list[bytes] = []
        async with aclosing(self._iter_chunks(meta)) as stream:
            async for chunk in stream:
                chunks.append(chunk)
        buffer = b"".join(chunks)
        if len(buffer) != meta.length:
            raise StorageDownloadError(
                object_id, f"read {len(buffer)} bytes, expected {meta.length}"
            )
        payload = base64.b64encode(buffer).decode("ascii")
        return f"data:{meta.content_type};base64,{payload}"

    @traced("media.delete")
    async def delete(self, object_id: str) -> bool:
        """Remove the object and its chunks.

        Best effort: returns False (and logs) if the object does not exist or
        any step fails. Chunks are removed before the metadata document, so a
        partial failure leaves the object visible to list_objects().
        """
        try:
            meta = await self.metadata(object_id)
            for n in range(meta.chunk_count):
                await self._chunks.document(self._chunk_doc_id(object_id, n)).delete()
            if not await self._files.document(object_id).delete(must_exist=True):
                return False
        except MediaNotFoundError:
            return False
        except Exception as e:
            logger.warning("Media delete failed for %s: %s", object_id, e)
            return False
        logger.info("Deleted media %s", object_id)
        return True

    async def list_objects(self) -> AsyncIterator[MediaMetadata]:
        """Yield metadata for every stored object."""
        async for snapshot in self._files.stream():
            yield self._to_metadata(snapshot)

    async def _discard_chunks(self, object_id: str, count: int) -> None:
        """Remove chunks 0..count-1 of an upload that never completed."""
        for n in range(count):
            try:
                await self._chunks.document(self._chunk_doc_id(object_id, n)).delete()
            except Exception:
                logger.warning(
                    "Could not discard chunk %d of incomplete upload %s", n, object_id
                )
