"""Helpers for handing async byte streams to StreamingResponse."""

from typing import AsyncIterator

from server.storage.base import BlobStream


async def iterate_and_close(blob: BlobStream) -> AsyncIterator[bytes]:
    """
    Yield a blob's pieces and close it even if the client goes away.
    """
    try:
        async for piece in blob:
            yield piece
    finally:
        await blob.aclose()


async def prime_stream(stream: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
    """
    Pull the first chunk of stream before the response starts.

    Errors raised while producing the first chunk surface here, while a
    clean JSON error can still be sent. The returned iterator replays the
    first chunk and then continues the original stream.
    """
    try:
        first = await stream.__anext__()
    except StopAsyncIteration:
        first = None
    except BaseException:
        await stream.aclose()
        raise

    async def replay() -> AsyncIterator[bytes]:
        try:
            if first is not None:
                yield first
                async for chunk in stream:
                    yield chunk
        finally:
            await stream.aclose()

    return replay()
