"""Shared pytest fixtures for all tests."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from server.database import init_database
from server.repositories.file_repository import FileRecord, FileRepository
from server.repositories.folder_repository import Folder, FolderRepository
from server.storage.local_storage import LocalBlobStorage
from server.utils import generate_uuid, utcnow


@pytest.fixture
def test_db(monkeypatch) -> Generator[Path, None, None]:
    """
    Create a temporary test database for each test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        monkeypatch.setattr("server.database.DATABASE_PATH", str(db_path))
        monkeypatch.setattr("server.config.DATABASE_PATH", str(db_path))
        init_database()
        yield db_path


@pytest.fixture
def storage(tmp_path) -> LocalBlobStorage:
    """
    Blob storage rooted in a temporary directory.
    """
    return LocalBlobStorage(tmp_path / "blobs", piece_size=16)


@pytest.fixture
def make_folder(test_db):
    """
    Factory inserting a folder row.

    Returns:
        Callable (owner_id, name) -> Folder
    """
    def _make(owner_id: str = "user-1", name: str = "Reports") -> Folder:
        return FolderRepository.create_folder(
            folder_id=generate_uuid(),
            owner_id=owner_id,
            name=name,
            created_at=utcnow(),
        )
    return _make


@pytest.fixture
def make_file(test_db, storage):
    """
    Factory storing bytes and inserting a file row in a folder.

    Returns:
        Async callable (folder, name, data, file_id=None) -> FileRecord
    """
    async def _make(folder: Folder, name: str, data: bytes, file_id: str = None) -> FileRecord:
        async def chunks():
            yield data

        blob = await storage.save(chunks(), name)
        return FileRepository.create_file(
            file_id=file_id or generate_uuid(),
            owner_id=folder.owner_id,
            folder_id=folder.folder_id,
            name=name,
            size=blob.size,
            content_type="text/plain",
            storage_key=blob.storage_key,
            created_at=utcnow(),
        )
    return _make
