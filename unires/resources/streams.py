"""Async byte streams returned by resources."""

import abc
import asyncio
import inspect
import io
from collections.abc import AsyncGenerator
from typing import Any, BinaryIO

import aiohttp

from ..exceptions import IOFailure

DEFAULT_CHUNK_SIZE = 8192


class ResourceStream(abc.ABC):
    """A readable byte stream opened from a resource.

    Streams are single-use and must be closed by the consumer, preferably
    with ``async with``.
    """

    def __init__(self, description: str) -> None:
        self.description = description
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything left if ``size`` is negative."""
        if self._closed:
            raise IOFailure(self.description, ValueError("I/O operation on closed stream"))
        try:
            return await self._read(size)
        except (OSError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise IOFailure(self.description, e) from e

    @abc.abstractmethod
    async def _read(self, size: int) -> bytes:
        """Backend read."""

    async def close(self) -> None:
        """Close the stream. Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        await self._close()

    @abc.abstractmethod
    async def _close(self) -> None:
        """Backend close."""

    async def iter_chunks(
        self, chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> AsyncGenerator[bytes, None]:
        """Yield the remaining content in chunks."""
        while chunk := await self.read(chunk_size):
            yield chunk

    async def __aenter__(self) -> "ResourceStream":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {self.description} ({state})>"


class FileStream(ResourceStream):
    """Stream over an ``aiofiles`` file handle."""

    def __init__(self, handle: Any, description: str) -> None:
        super().__init__(description)
        self.handle = handle

    async def _read(self, size: int) -> bytes:
        return await self.handle.read(size)

    async def _close(self) -> None:
        await self.handle.close()


class BufferedStream(ResourceStream):
    """Stream over a synchronous binary file object.

    Reads on real files run in a worker thread; in-memory buffers are read
    directly.
    """

    def __init__(self, raw: BinaryIO, description: str) -> None:
        super().__init__(description)
        self.raw = raw
        self._in_memory = isinstance(raw, io.BytesIO)

    async def _read(self, size: int) -> bytes:
        if self._in_memory:
            return self.raw.read(size)
        return await asyncio.to_thread(self.raw.read, size)

    async def _close(self) -> None:
        if self._in_memory:
            self.raw.close()
        else:
            await asyncio.to_thread(self.raw.close)


class HttpStream(ResourceStream):
    """Stream over an ``aiohttp`` response. Owns the session it came from."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        response: aiohttp.ClientResponse,
        description: str,
    ) -> None:
        super().__init__(description)
        self.session = session
        self.response = response

    async def _read(self, size: int) -> bytes:
        return await self.response.content.read(size)

    async def _close(self) -> None:
        self.response.release()
        await self.session.close()


def wrap_stream(stream: Any, description: str) -> ResourceStream:
    """Adapt a binary file object or an existing stream to ``ResourceStream``."""
    if isinstance(stream, ResourceStream):
        return stream
    if isinstance(stream, bytes | bytearray | memoryview):
        return BufferedStream(io.BytesIO(bytes(stream)), description)
    if hasattr(stream, "read") and inspect.iscoroutinefunction(stream.read):
        return FileStream(stream, description)
    if hasattr(stream, "read"):
        return BufferedStream(stream, description)
    raise TypeError(f"Cannot read from {type(stream).__name__}")


class ReadableChannel:
    """Channel view over a resource stream.

    ``read_into`` fills a caller-supplied buffer and returns the number of
    bytes written, ``0`` once the end of the content is reached.
    """

    def __init__(self, stream: ResourceStream) -> None:
        self.stream = stream

    def is_open(self) -> bool:
        return not self.stream.closed

    async def read_into(self, buffer: bytearray | memoryview) -> int:
        data = await self.stream.read(len(buffer))
        buffer[: len(data)] = data
        return len(data)

    async def close(self) -> None:
        await self.stream.close()

    async def __aenter__(self) -> "ReadableChannel":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


class FileChannel(ReadableChannel):
    """Channel reading straight into the buffer from an ``aiofiles`` handle."""

    def __init__(self, stream: FileStream) -> None:
        super().__init__(stream)

    async def read_into(self, buffer: bytearray | memoryview) -> int:
        if self.stream.closed:
            raise IOFailure(
                self.stream.description, ValueError("I/O operation on closed channel")
            )
        try:
            count = await self.stream.handle.readinto(buffer)
        except OSError as e:
            raise IOFailure(self.stream.description, e) from e
        return count or 0
