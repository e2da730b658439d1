"""Blob storage interface: persists and streams raw file bytes by storage key."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterable


@dataclass(frozen=True)
class StoredBlob:
    storage_key: str
    size: int


class BlobStream(ABC):
    """
    Async iterator over the bytes of one blob.

    aclose() must be safe to call more than once.
    """

    def __aiter__(self) -> "BlobStream":
        return self

    @abstractmethod
    async def __anext__(self) -> bytes:
        ...

    @abstractmethod
    async def aclose(self) -> None:
        ...

    async def __aenter__(self) -> "BlobStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class BlobStorage(ABC):
    """
    Swappable byte store used by uploads, downloads and archive building.
    """

    @abstractmethod
    async def save(self, chunks: AsyncIterable[bytes], original_name: str) -> StoredBlob:
        """
        Persist the given bytes under a new storage key.
        """

    @abstractmethod
    async def open_read_stream(self, storage_key: str) -> BlobStream:
        """
        Open the bytes stored under storage_key.

        Raises:
            BlobNotFoundError: If nothing is stored under the key
        """

    @abstractmethod
    async def remove(self, storage_key: str) -> None:
        """
        Delete the bytes under storage_key. Missing keys are ignored.
        """
