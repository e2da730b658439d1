"""Tests for streaming ZIP construction."""

import io
import os
import zipfile
from unittest.mock import MagicMock

import pytest

from server.exceptions import ArchiveStreamError, BlobNotFoundError
from server.repositories.file_repository import FileRecord
from server.services.archive_builder import ArchiveBuilder
from server.services.event_bus import ArchiveEventBus
from server.storage.local_storage import LocalBlobStream
from server.utils import utcnow


async def collect(stream) -> bytes:
    data = b""
    async for chunk in stream:
        data += chunk
    return data


@pytest.fixture
def received():
    return []


@pytest.fixture
def event_bus(received):
    return ArchiveEventBus([received.append])


@pytest.fixture
def builder(storage, event_bus):
    return ArchiveBuilder(storage, event_bus)


class TestArchiveBuilder:
    @pytest.mark.asyncio
    async def test_archive_contains_selected_files(self, builder, make_folder, make_file):
        folder = make_folder(name="Reports")
        a = await make_file(folder, "a.txt", b"alpha " * 100)
        b = await make_file(folder, "b.csv", b"x,y\n1,2\n")

        result = await builder.build(folder, [a, b])
        data = await collect(result.stream)

        assert result.filename == "Reports.zip"
        assert result.headers["Content-Type"] == "application/zip"
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.namelist() == ["a.txt", "b.csv"]
            assert zf.read("a.txt") == b"alpha " * 100
            assert zf.read("b.csv") == b"x,y\n1,2\n"
            assert zf.getinfo("a.txt").compress_type == zipfile.ZIP_DEFLATED

    @pytest.mark.asyncio
    async def test_empty_file_list_gives_valid_archive(self, builder, make_folder):
        folder = make_folder()

        result = await builder.build(folder, [])
        data = await collect(result.stream)

        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.namelist() == []

    @pytest.mark.asyncio
    async def test_same_input_same_contents(self, builder, make_folder, make_file):
        folder = make_folder()
        a = await make_file(folder, "a.txt", b"hello")

        first = await collect((await builder.build(folder, [a])).stream)
        second = await collect((await builder.build(folder, [a])).stream)

        with zipfile.ZipFile(io.BytesIO(first)) as z1, zipfile.ZipFile(io.BytesIO(second)) as z2:
            assert z1.namelist() == z2.namelist()
            assert z1.read("a.txt") == z2.read("a.txt")

    @pytest.mark.asyncio
    async def test_publishes_one_event_per_build(self, builder, event_bus, received, make_folder, make_file):
        folder = make_folder(owner_id="owner-7")
        a = await make_file(folder, "a.txt", b"1")
        b = await make_file(folder, "b.txt", b"2")

        await builder.build(folder, [a, b])
        await event_bus.drain()

        assert len(received) == 1
        event = received[0]
        assert event.folder_id == folder.folder_id
        assert event.user_id == "owner-7"
        assert event.file_count == 2

    @pytest.mark.asyncio
    async def test_event_published_before_stream_is_consumed(self, builder, event_bus, received, make_folder):
        folder = make_folder()

        await builder.build(folder, [])
        await event_bus.drain()

        assert len(received) == 1
        assert received[0].file_count == 0

    @pytest.mark.asyncio
    async def test_missing_blob_fails_the_stream_not_build(self, builder, make_folder):
        folder = make_folder()
        ghost = FileRecord(
            file_id="ghost",
            owner_id=folder.owner_id,
            folder_id=folder.folder_id,
            name="ghost.txt",
            size=3,
            content_type="text/plain",
            storage_key="does-not-exist.txt",
            created_at=utcnow(),
        )

        result = await builder.build(folder, [ghost])

        with pytest.raises(ArchiveStreamError):
            await collect(result.stream)

    @pytest.mark.asyncio
    async def test_duplicate_names_are_passed_through(self, builder, make_folder, make_file):
        folder = make_folder()
        first = await make_file(folder, "same.txt", b"one")
        second = await make_file(folder, "same.txt", b"two")

        data = await collect((await builder.build(folder, [first, second])).stream)

        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            infos = zf.infolist()
            assert [i.filename for i in infos] == ["same.txt", "same.txt"]
            assert zf.open(infos[0]).read() == b"one"
            assert zf.open(infos[1]).read() == b"two"

    @pytest.mark.asyncio
    async def test_blobs_are_opened_lazily(self, event_bus, make_folder, make_file, storage):
        folder = make_folder()
        a = await make_file(folder, "a.txt", b"aaa")
        spy = MagicMock(wraps=storage)
        opened = []

        async def open_read_stream(key):
            blob = await storage.open_read_stream(key)
            opened.append(blob)
            return blob

        spy.open_read_stream = open_read_stream
        builder = ArchiveBuilder(spy, event_bus)

        result = await builder.build(folder, [a])
        assert opened == []

        await collect(result.stream)

        assert len(opened) == 1
        assert isinstance(opened[0], LocalBlobStream)
        assert opened[0].closed is True

    @pytest.mark.asyncio
    async def test_closing_stream_early_closes_open_blobs(self, event_bus, make_folder, make_file, storage):
        folder = make_folder()
        big = await make_file(folder, "big.bin", os.urandom(512 * 1024))
        opened = []
        original_open = storage.open_read_stream

        async def open_read_stream(key):
            blob = await original_open(key)
            opened.append(blob)
            return blob

        storage.open_read_stream = open_read_stream
        builder = ArchiveBuilder(storage, event_bus)

        result = await builder.build(folder, [big])
        await result.stream.__anext__()
        await result.stream.aclose()

        assert len(opened) == 1
        assert opened[0].closed is True


class TestArchiveFailures:
    @pytest.mark.asyncio
    async def test_missing_first_blob_fails_on_first_pull(self, builder, make_folder, make_file, storage):
        folder = make_folder()
        a = await make_file(folder, "a.txt", b"a" * 1000)
        await storage.remove(a.storage_key)

        result = await builder.build(folder, [a])

        with pytest.raises(ArchiveStreamError) as exc_info:
            await result.stream.__anext__()
        assert isinstance(exc_info.value.__cause__, BlobNotFoundError)

    @pytest.mark.asyncio
    async def test_second_blob_failing_after_first_chunk(self, event_bus, make_folder, make_file, storage):
        folder = make_folder()
        first = await make_file(folder, "first.bin", os.urandom(256 * 1024))
        second = await make_file(folder, "second.bin", b"never read")
        await storage.remove(second.storage_key)
        builder = ArchiveBuilder(storage, event_bus)

        result = await builder.build(folder, [first, second])
        sent = await result.stream.__anext__()
        assert sent.startswith(b"PK\x03\x04")

        with pytest.raises(ArchiveStreamError) as exc_info:
            await collect(result.stream)
        assert isinstance(exc_info.value.__cause__, BlobNotFoundError)

    @pytest.mark.asyncio
    async def test_writer_ending_without_central_directory(self, builder, make_folder, make_file, monkeypatch):
        folder = make_folder()
        a = await make_file(folder, "a.txt", b"alpha")

        async def cut_short(members, chunk_size, get_compressobj):
            async for _ in members:
                break
            yield b"PK\x03\x04" + b"\x00" * 26

        monkeypatch.setattr("server.services.archive_builder.async_stream_zip", cut_short)
        result = await builder.build(folder, [a])

        with pytest.raises(ArchiveStreamError, match="ended before its central directory"):
            await collect(result.stream)

    @pytest.mark.asyncio
    async def test_writer_output_missing_end_record(self, builder, make_folder, monkeypatch):
        folder = make_folder()

        async def no_end_record(members, chunk_size, get_compressobj):
            async for _ in members:
                pass
            yield b"PK\x01\x02" + b"\x00" * 42

        monkeypatch.setattr("server.services.archive_builder.async_stream_zip", no_end_record)
        result = await builder.build(folder, [])

        with pytest.raises(ArchiveStreamError):
            await collect(result.stream)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chunk_size", [16, 31, 32, 33, 64])
    async def test_small_chunk_sizes_never_end_silently(self, storage, event_bus, make_folder, make_file, chunk_size):
        folder = make_folder()
        a = await make_file(folder, "a.txt", b"alpha " * 100)
        b = await make_file(folder, "b.csv", b"x,y\n1,2\n")
        builder = ArchiveBuilder(storage, event_bus, chunk_size=chunk_size)

        result = await builder.build(folder, [a, b])
        try:
            data = await collect(result.stream)
        except ArchiveStreamError:
            return

        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.namelist() == ["a.txt", "b.csv"]
            assert zf.read("a.txt") == b"alpha " * 100
