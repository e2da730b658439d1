"""Tests for local-disk blob storage."""

import pytest

from server.exceptions import BlobNotFoundError, NotFoundError
from server.storage.local_storage import LocalBlobStorage


async def chunks_of(*parts: bytes):
    for part in parts:
        yield part


class TestLocalBlobStorage:
    @pytest.mark.asyncio
    async def test_save_and_read_back(self, storage):
        stored = await storage.save(chunks_of(b"hello ", b"world"), "greeting.txt")

        assert stored.size == 11
        assert stored.storage_key.endswith(".txt")

        async with await storage.open_read_stream(stored.storage_key) as blob:
            data = b"".join([piece async for piece in blob])
        assert data == b"hello world"

    @pytest.mark.asyncio
    async def test_reads_in_pieces(self, tmp_path):
        storage = LocalBlobStorage(tmp_path, piece_size=4)
        stored = await storage.save(chunks_of(b"0123456789"), "digits")

        blob = await storage.open_read_stream(stored.storage_key)
        pieces = [piece async for piece in blob]

        assert pieces == [b"0123", b"4567", b"89"]
        assert blob.closed is True

    @pytest.mark.asyncio
    async def test_keys_are_unique(self, storage):
        first = await storage.save(chunks_of(b"a"), "same.txt")
        second = await storage.save(chunks_of(b"b"), "same.txt")

        assert first.storage_key != second.storage_key

    @pytest.mark.asyncio
    async def test_missing_key(self, storage):
        with pytest.raises(BlobNotFoundError) as exc_info:
            await storage.open_read_stream("missing.bin")

        assert isinstance(exc_info.value, NotFoundError)

    @pytest.mark.asyncio
    async def test_key_cannot_escape_base_dir(self, tmp_path):
        secret = tmp_path / "secret.txt"
        secret.write_bytes(b"top secret")
        storage = LocalBlobStorage(tmp_path / "blobs")

        with pytest.raises(BlobNotFoundError):
            await storage.open_read_stream("../secret.txt")

    @pytest.mark.asyncio
    async def test_aclose_is_idempotent(self, storage):
        stored = await storage.save(chunks_of(b"data"), "x.bin")
        blob = await storage.open_read_stream(stored.storage_key)

        await blob.aclose()
        await blob.aclose()

        assert [piece async for piece in blob] == []

    @pytest.mark.asyncio
    async def test_remove(self, storage):
        stored = await storage.save(chunks_of(b"data"), "x.bin")

        await storage.remove(stored.storage_key)
        await storage.remove(stored.storage_key)

        with pytest.raises(BlobNotFoundError):
            await storage.open_read_stream(stored.storage_key)

    @pytest.mark.asyncio
    async def test_failed_save_leaves_nothing_behind(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)

        async def broken():
            yield b"partial"
            raise ConnectionError("client went away")

        with pytest.raises(ConnectionError):
            await storage.save(broken(), "upload.bin")

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["", ".", "..", "/", "nested/.."])
    async def test_keys_without_a_file_name(self, storage, key):
        with pytest.raises(BlobNotFoundError):
            await storage.open_read_stream(key)

        await storage.remove(key)
        assert storage.base_dir.is_dir()
