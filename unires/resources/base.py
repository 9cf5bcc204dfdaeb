"""Base classes and interfaces for unires resources."""

import abc
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

import aiofiles.os
from pydantic import AnyUrl, BaseModel, ConfigDict

from ..exceptions import (
    IOFailure,
    NotFoundError,
    ResolutionError,
    ResourceError,
    UnresolvableLocatorError,
)
from .streams import DEFAULT_CHUNK_SIZE, ReadableChannel, ResourceStream


class ResourceType(str, Enum):
    """Enumeration of resource backends."""

    FILE = "file"
    CLASSPATH = "classpath"
    URL = "url"
    BYTES = "bytes"
    STREAM = "stream"
    DESCRIPTIVE = "descriptive"


class Resource(BaseModel, abc.ABC):
    """Lazy, immutable descriptor for a readable piece of content.

    Constructing a resource performs no I/O, so a resource is not proof
    that its content exists. Capability methods that may touch the backend
    are coroutines; the others only compute over the locator.

    Every resource except an open-stream one can be read any number of
    times, each read opening a fresh stream.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    resource_type: ResourceType

    @abc.abstractmethod
    def get_description(self) -> str:
        """Describe the backend kind and locator, for diagnostics."""

    @abc.abstractmethod
    async def open_stream(self) -> ResourceStream:
        """Open a fresh stream over the content.

        Raises:
            NotFoundError: If the content does not exist
            IOFailure: If the backend fails to open it
        """

    async def exists(self) -> bool:
        """Check whether the content exists in the backend right now."""
        if self.is_file():
            try:
                path = self.get_file()
            except ResourceError:
                return False
            return await aiofiles.os.path.exists(path)

        try:
            stream = await self.open_stream()
        except (ResourceError, OSError):
            return False
        await stream.close()
        return True

    async def is_readable(self) -> bool:
        """Check whether the content can be read; implies ``exists()``."""
        return await self.exists()

    def is_open(self) -> bool:
        """Whether this wraps an already-open, single-use stream."""
        return False

    def is_file(self) -> bool:
        """Hint that the content lives in the file system."""
        return False

    def is_writable(self) -> bool:
        """Whether ``write`` is supported for this resource."""
        return False

    def get_url(self) -> AnyUrl:
        """Get the URL form of this resource."""
        raise UnresolvableLocatorError(self.get_description(), form="URL")

    def get_uri(self) -> str:
        """Get the URI form of this resource."""
        return str(self.get_url())

    def get_file(self) -> Path:
        """Get the file-system path of this resource."""
        raise UnresolvableLocatorError(self.get_description(), form="file path")

    async def readable_channel(self) -> ReadableChannel:
        """Open a channel over a fresh stream."""
        return ReadableChannel(await self.open_stream())

    async def content_length(self) -> int:
        """Determine the content length in bytes by reading the content."""
        if self.is_open():
            raise ResolutionError(
                self.get_description(),
                reason="has no determinable content length; its stream is single-use",
            )
        length = 0
        try:
            async with await self.open_stream() as stream:
                async for chunk in stream.iter_chunks():
                    length += len(chunk)
        except (NotFoundError, IOFailure) as e:
            raise ResolutionError(
                self.get_description(),
                reason="has no determinable content length",
                cause=e,
            ) from e
        return length

    async def last_modified(self) -> datetime:
        """Get the last-modified timestamp from the backing file."""
        try:
            path = self.get_file()
            stats = await aiofiles.os.stat(path)
        except (ResourceError, OSError) as e:
            raise ResolutionError(
                self.get_description(),
                reason="has no determinable last-modified timestamp",
                cause=e,
            ) from e
        return datetime.fromtimestamp(stats.st_mtime, tz=UTC)

    def create_relative(self, relative_path: str) -> "Resource":
        """Create a resource at ``relative_path`` relative to this one."""
        raise ResolutionError(
            self.get_description(),
            reason=f"does not support relative resolution of '{relative_path}'",
        )

    def get_filename(self) -> str | None:
        """Get the last path segment, if the backend has paths."""
        return None

    async def read(self) -> bytes:
        """Read the whole content."""
        async with await self.open_stream() as stream:
            return await stream.read()

    async def read_text(self, encoding: str = "utf-8") -> str:
        """Read the whole content as text."""
        return (await self.read()).decode(encoding)

    async def read_stream(
        self, chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> AsyncGenerator[bytes, None]:
        """Stream the content in chunks."""
        async with await self.open_stream() as stream:
            async for chunk in stream.iter_chunks(chunk_size):
                yield chunk

    async def write(self, content: str | bytes) -> None:
        """Write content to the resource if supported."""
        raise NotImplementedError("Write operation not supported for this resource")

    async def delete(self) -> None:
        """Delete the resource if supported."""
        raise NotImplementedError("Delete operation not supported for this resource")

    def __str__(self) -> str:
        return self.get_description()
