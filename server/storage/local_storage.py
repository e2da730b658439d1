"""Local-disk blob storage backed by aiofiles."""

from pathlib import Path
from typing import AsyncIterable, Union

import aiofiles
import aiofiles.os

from common.constants import STREAM_PIECE_SIZE_BYTES
from common.logging_config import get_logger
from server.exceptions import BlobNotFoundError
from server.storage.base import BlobStorage, BlobStream, StoredBlob
from server.utils import generate_uuid

logger = get_logger(__name__)


class LocalBlobStream(BlobStream):
    def __init__(self, handle, storage_key: str, piece_size: int = STREAM_PIECE_SIZE_BYTES):
        self._handle = handle
        self._storage_key = storage_key
        self._piece_size = piece_size
        self._closed = False

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration

        piece = await self._handle.read(self._piece_size)
        if not piece:
            await self.aclose()
            raise StopAsyncIteration
        return piece

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._handle.close()
        logger.debug(f"Closed blob stream [storage_key={self._storage_key}]")

    @property
    def closed(self) -> bool:
        return self._closed


class LocalBlobStorage(BlobStorage):
    """
    Stores blobs as flat files under base_dir. Storage keys are file names;
    any directory part of a key is ignored when resolving it.
    """

    def __init__(self, base_dir: Union[str, Path], piece_size: int = STREAM_PIECE_SIZE_BYTES):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.piece_size = piece_size

    def _resolve(self, storage_key: str) -> Path:
        name = Path(storage_key).name
        if name in ("", ".", ".."):
            raise BlobNotFoundError(f"Stored bytes not found for key {storage_key!r}")
        return self.base_dir / name

    async def save(self, chunks: AsyncIterable[bytes], original_name: str) -> StoredBlob:
        storage_key = f"{generate_uuid()}{Path(original_name).suffix}"
        path = self._resolve(storage_key)
        size = 0

        try:
            async with aiofiles.open(path, "wb") as f:
                async for chunk in chunks:
                    await f.write(chunk)
                    size += len(chunk)
        except Exception:
            logger.error(f"Failed to save blob [storage_key={storage_key}]", exc_info=True)
            await self.remove(storage_key)
            raise

        logger.info(f"Saved blob [storage_key={storage_key}] [size={size}]")
        return StoredBlob(storage_key=storage_key, size=size)

    async def open_read_stream(self, storage_key: str) -> LocalBlobStream:
        path = self._resolve(storage_key)
        try:
            handle = await aiofiles.open(path, "rb")
        except FileNotFoundError:
            raise BlobNotFoundError(f"Stored bytes not found for key {storage_key}")

        return LocalBlobStream(handle, storage_key, self.piece_size)

    async def remove(self, storage_key: str) -> None:
        try:
            path = self._resolve(storage_key)
            await aiofiles.os.remove(path)
            logger.info(f"Removed blob [storage_key={storage_key}]")
        except (FileNotFoundError, BlobNotFoundError):
            logger.debug(f"Blob already absent [storage_key={storage_key}]")
