"""Blob storage backends."""

from server.storage.base import BlobStorage, BlobStream, StoredBlob
from server.storage.local_storage import LocalBlobStorage, LocalBlobStream

__all__ = [
    "BlobStorage",
    "BlobStream",
    "StoredBlob",
    "LocalBlobStorage",
    "LocalBlobStream",
]
