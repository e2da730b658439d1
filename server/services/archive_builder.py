"""Streaming ZIP construction for a folder's files."""

import zlib
from stat import S_IFREG
from typing import AsyncIterator, List, Optional, Sequence

from stream_zip import ZIP_64, async_stream_zip

from common.constants import ARCHIVE_CHUNK_SIZE_BYTES, ZIP_COMPRESSION_LEVEL
from common.logging_config import get_logger
from common.types import ArchiveCompletionEvent
from server.exceptions import ArchiveStreamError
from server.repositories.file_repository import FileRecord
from server.repositories.folder_repository import Folder
from server.services.event_bus import ArchiveEventBus
from server.storage.base import BlobStorage, BlobStream
from server.types import ArchiveResult
from server.utils import utcnow

logger = get_logger(__name__)

MEMBER_PERMS = S_IFREG | 0o644

# End of central directory record, written last and without a comment.
EOCD_SIGNATURE = b"PK\x05\x06"
EOCD_RECORD_SIZE = 22


class ArchiveBuilder:
    """
    Streams a deflate-compressed ZIP of the given files.

    The first blob is opened when the stream is first pulled. The rest are
    opened one at a time as the writer reaches them, so nothing is read
    ahead of the consumer. Read and write failures surface as
    ArchiveStreamError from the returned stream, never from build(). So
    does an archive that stops before its end of central directory record.
    """

    def __init__(
        self,
        storage: BlobStorage,
        event_bus: ArchiveEventBus,
        compression_level: int = ZIP_COMPRESSION_LEVEL,
        chunk_size: int = ARCHIVE_CHUNK_SIZE_BYTES,
    ):
        self.storage = storage
        self.event_bus = event_bus
        self.compression_level = compression_level
        self.chunk_size = chunk_size

    async def build(self, folder: Folder, files: Sequence[FileRecord]) -> ArchiveResult:
        files = list(files)
        stream = self._stream_archive(folder, files)

        self.event_bus.publish(ArchiveCompletionEvent(
            folder_id=folder.folder_id,
            user_id=folder.owner_id,
            file_count=len(files),
            timestamp=utcnow(),
        ))

        logger.info(f"Archive prepared for folder {folder.folder_id} with {len(files)} files")

        return ArchiveResult(
            stream=stream,
            filename=f"{folder.name}.zip",
            headers={"Content-Type": "application/zip"},
        )

    def _get_compressobj(self):
        return zlib.compressobj(wbits=-zlib.MAX_WBITS, level=self.compression_level)

    async def _stream_archive(self, folder: Folder, files: List[FileRecord]) -> AsyncIterator[bytes]:
        opened: List[BlobStream] = []
        members_done = False

        async def open_blob(file: FileRecord) -> BlobStream:
            blob = await self.storage.open_read_stream(file.storage_key)
            opened.append(blob)
            return blob

        async def member_chunks(file: FileRecord, blob: Optional[BlobStream] = None):
            if blob is None:
                blob = await open_blob(file)
            try:
                async for piece in blob:
                    yield piece
            finally:
                await blob.aclose()

        async def members(first_blob: Optional[BlobStream]):
            nonlocal members_done
            for index, file in enumerate(files):
                modified_at = file.created_at or utcnow()
                blob = first_blob if index == 0 else None
                yield (file.name, modified_at, MEMBER_PERMS, ZIP_64, member_chunks(file, blob))
            members_done = True

        bytes_streamed = 0
        tail = b""
        try:
            # The first blob is opened before any byte is produced so a
            # missing file fails the stream while no response has started.
            first_blob = await open_blob(files[0]) if files else None

            async for chunk in async_stream_zip(
                members(first_blob),
                chunk_size=self.chunk_size,
                get_compressobj=self._get_compressobj,
            ):
                bytes_streamed += len(chunk)
                tail = (tail + chunk[-EOCD_RECORD_SIZE:])[-EOCD_RECORD_SIZE:]
                yield chunk

            if not members_done or not tail.startswith(EOCD_SIGNATURE):
                raise ArchiveStreamError(
                    f"Archive for folder {folder.name} ended before its central directory was written"
                )
        except ArchiveStreamError:
            logger.error(
                f"Archive stream for folder {folder.folder_id} ended early after {bytes_streamed} bytes"
            )
            raise
        except Exception as e:
            logger.error(
                f"Archive stream failed for folder {folder.folder_id} after {bytes_streamed} bytes: {e}",
                exc_info=True
            )
            raise ArchiveStreamError(f"Failed to build archive for folder {folder.name}: {e}") from e
        finally:
            for blob in opened:
                await blob.aclose()

        logger.info(f"Streamed archive for folder {folder.folder_id}: {bytes_streamed} bytes")
