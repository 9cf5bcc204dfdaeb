"""Core resource implementations."""

import asyncio
import io
import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress
from datetime import datetime
from email.utils import parsedate_to_datetime
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urljoin, urlparse

import aiofiles
import aiofiles.os
import aiohttp
from aiohttp import ClientTimeout
from pydantic import (
    AnyUrl,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from ..exceptions import (
    IOFailure,
    NotFoundError,
    ResolutionError,
    ResourceError,
    StreamConsumedError,
    UnresolvableLocatorError,
)
from .base import Resource, ResourceType
from .context import LookupContext
from .paths import (
    FOLDER_SEPARATOR,
    apply_relative_path,
    clean_path,
    escapes_root,
    get_filename,
    normalize_separators,
)
from .streams import (
    BufferedStream,
    FileChannel,
    FileStream,
    HttpStream,
    ReadableChannel,
    ResourceStream,
    wrap_stream,
)
from .utils import url_to_path

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND_STATUSES = frozenset({404, 410})


async def _open_file(path: Path, description: str) -> FileStream:
    try:
        handle = await aiofiles.open(path, mode="rb")
    except FileNotFoundError as e:
        raise NotFoundError(description, cause=e) from e
    except OSError as e:
        raise IOFailure(description, e) from e
    return FileStream(handle, description)


class FileResource(Resource):
    """A file-system resource with writing support."""

    path: Path = Field(description="Path to the file")
    folder: bool = Field(
        default=False, description="Whether the location ended with a separator"
    )
    resource_type: ResourceType = ResourceType.FILE

    @model_validator(mode="before")
    @classmethod
    def detect_folder(cls, data: Any) -> Any:
        """Remember a trailing separator, which ``Path`` drops."""
        if isinstance(data, dict) and "folder" not in data:
            path = data.get("path")
            if isinstance(path, str) and normalize_separators(path).endswith(
                FOLDER_SEPARATOR
            ):
                data = {**data, "folder": True}
        return data

    def get_description(self) -> str:
        return f"file [{self.path}]"

    def is_file(self) -> bool:
        return True

    def is_writable(self) -> bool:
        return True

    async def is_readable(self) -> bool:
        """Check the file exists, is not a directory and may be read."""
        return await aiofiles.os.path.isfile(self.path) and os.access(
            self.path, os.R_OK
        )

    def get_file(self) -> Path:
        return self.path

    def get_url(self) -> AnyUrl:
        return AnyUrl(self.path.absolute().as_uri())

    async def open_stream(self) -> ResourceStream:
        return await _open_file(self.path, self.get_description())

    async def readable_channel(self) -> ReadableChannel:
        return FileChannel(await _open_file(self.path, self.get_description()))

    async def content_length(self) -> int:
        try:
            stats = await aiofiles.os.stat(self.path)
        except OSError as e:
            raise ResolutionError(
                self.get_description(),
                reason="has no determinable content length",
                cause=e,
            ) from e
        return stats.st_size

    def create_relative(self, relative_path: str) -> "FileResource":
        location = self.path.as_posix()
        if self.folder and not location.endswith(FOLDER_SEPARATOR):
            location += FOLDER_SEPARATOR
        return type(self)(path=apply_relative_path(location, relative_path))

    def get_filename(self) -> str | None:
        return self.path.name or None

    async def write(self, content: str | bytes) -> None:
        """Write content to the file, creating parent directories."""
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)

        if isinstance(content, str):
            content = content.encode("utf-8")
        try:
            async with aiofiles.open(self.path, mode="wb") as f:
                await f.write(content)
                await f.flush()
        except OSError as e:
            raise IOFailure(self.get_description(), e) from e

    async def delete(self) -> None:
        """Delete the file."""
        with suppress(FileNotFoundError):
            await aiofiles.os.remove(self.path)


class ClasspathResource(Resource):
    """An asset embedded in an importable package."""

    path: str = Field(description="Asset name inside the lookup context")
    context: LookupContext = Field(default_factory=LookupContext)
    resource_type: ResourceType = ResourceType.CLASSPATH

    @field_validator("path")
    @classmethod
    def normalize_path(cls, path: str) -> str:
        """Clean the asset name and drop any leading slash."""
        return clean_path(path).lstrip(FOLDER_SEPARATOR)

    def _locate(self) -> Traversable | None:
        if escapes_root(self.path):
            return None
        return self.context.locate(self.path)

    def _locate_existing(self) -> Traversable:
        target = self._locate()
        if target is None or not (target.is_file() or target.is_dir()):
            raise NotFoundError(self.get_description())
        return target

    def get_description(self) -> str:
        if self.context.anchor:
            return f"class path resource [{self.path}] in {self.context.describe()}"
        return f"class path resource [{self.path}]"

    async def exists(self) -> bool:
        target = self._locate()
        return target is not None and (target.is_file() or target.is_dir())

    async def is_readable(self) -> bool:
        target = self._locate()
        return target is not None and target.is_file()

    def is_file(self) -> bool:
        return isinstance(self._locate(), Path)

    def get_file(self) -> Path:
        target = self._locate_existing()
        if isinstance(target, Path):
            return target
        raise UnresolvableLocatorError(self.get_description(), form="file path")

    def get_url(self) -> AnyUrl:
        target = self._locate_existing()
        if isinstance(target, Path):
            return AnyUrl(target.absolute().as_uri())
        raise UnresolvableLocatorError(self.get_description(), form="URL")

    async def open_stream(self) -> ResourceStream:
        target = self._locate()
        if target is None or not target.is_file():
            raise NotFoundError(self.get_description())
        if isinstance(target, Path):
            return await _open_file(target, self.get_description())
        try:
            raw = await asyncio.to_thread(target.open, "rb")
        except FileNotFoundError as e:
            raise NotFoundError(self.get_description(), cause=e) from e
        except OSError as e:
            raise IOFailure(self.get_description(), e) from e
        return BufferedStream(raw, self.get_description())

    async def content_length(self) -> int:
        if self.is_file():
            try:
                stats = await aiofiles.os.stat(self.get_file())
            except (ResourceError, OSError) as e:
                raise ResolutionError(
                    self.get_description(),
                    reason="has no determinable content length",
                    cause=e,
                ) from e
            return stats.st_size
        return await super().content_length()

    def create_relative(self, relative_path: str) -> "ClasspathResource":
        path = apply_relative_path(self.path, relative_path)
        if escapes_root(path.lstrip(FOLDER_SEPARATOR)):
            raise ResolutionError(
                self.get_description(),
                reason=f"cannot resolve '{relative_path}' outside its package namespace",
            )
        return self.model_copy(update={"path": path.lstrip(FOLDER_SEPARATOR)})

    def get_filename(self) -> str | None:
        return get_filename(self.path)


class UrlResource(Resource):
    """A URL resource fetched over HTTP(S) with aiohttp."""

    url: str = Field(description="URL to fetch content from")
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=30.0)
    max_redirects: int = Field(default=5)
    resource_type: ResourceType = ResourceType.URL

    def __hash__(self) -> int:
        return hash(
            (
                type(self),
                self.url,
                frozenset(self.headers.items()),
                self.timeout,
                self.max_redirects,
            )
        )

    def get_description(self) -> str:
        return f"URL [{self.url}]"

    def get_url(self) -> AnyUrl:
        try:
            return AnyUrl(self.url)
        except ValidationError as e:
            raise UnresolvableLocatorError(
                self.get_description(), form="URL", cause=e
            ) from e

    def get_uri(self) -> str:
        return self.url

    async def exists(self) -> bool:
        try:
            async with self._get_http_response("HEAD") as response:
                return response.status < 400
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError):
            logger.debug("HEAD request failed for %s", self.url, exc_info=True)
            return False

    async def open_stream(self) -> ResourceStream:
        session = aiohttp.ClientSession(timeout=ClientTimeout(total=self.timeout))
        try:
            response = await session.get(
                self.url, headers=self.headers, max_redirects=self.max_redirects
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            await session.close()
            raise IOFailure(self.get_description(), e) from e

        if response.status >= 400:
            status = response.status
            response.release()
            await session.close()
            if status in HTTP_NOT_FOUND_STATUSES:
                raise NotFoundError(self.get_description(), details={"status": status})
            raise IOFailure(
                self.get_description(), OSError(f"HTTP status {status}")
            )
        return HttpStream(session, response, self.get_description())

    async def content_length(self) -> int:
        async with self._head_for("content length") as response:
            if response.content_length is None:
                raise ResolutionError(
                    self.get_description(), reason="reported no content length"
                )
            return response.content_length

    async def last_modified(self) -> datetime:
        async with self._head_for("last-modified timestamp") as response:
            header = response.headers.get("Last-Modified")
            if not header:
                raise ResolutionError(
                    self.get_description(), reason="reported no last-modified timestamp"
                )
            try:
                return parsedate_to_datetime(header)
            except (TypeError, ValueError) as e:
                raise ResolutionError(
                    self.get_description(),
                    reason=f"reported an invalid last-modified timestamp '{header}'",
                    cause=e,
                ) from e

    def create_relative(self, relative_path: str) -> "UrlResource":
        url = urljoin(self.url, normalize_separators(relative_path))
        return self.model_copy(update={"url": url})

    def get_filename(self) -> str | None:
        return get_filename(unquote(urlparse(self.url).path))

    @asynccontextmanager
    async def _get_http_response(
        self, method: str = "GET"
    ) -> AsyncGenerator[aiohttp.ClientResponse, None]:
        """Get HTTP response with proper session management."""
        timeout_obj = ClientTimeout(total=self.timeout)
        async with (
            aiohttp.ClientSession() as session,
            session.request(
                method,
                self.url,
                headers=self.headers,
                timeout=timeout_obj,
                max_redirects=self.max_redirects,
            ) as response,
        ):
            yield response

    @asynccontextmanager
    async def _head_for(self, what: str) -> AsyncGenerator[aiohttp.ClientResponse, None]:
        """HEAD the URL, mapping failures to ``ResolutionError``."""
        try:
            async with self._get_http_response("HEAD") as response:
                response.raise_for_status()
                yield response
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ResolutionError(
                self.get_description(),
                reason=f"has no determinable {what}",
                cause=e,
            ) from e


class FileUrlResource(UrlResource):
    """A ``file:`` URL, read through the file system."""

    def _as_file_resource(self) -> FileResource:
        return FileResource(path=self.get_file())

    def is_file(self) -> bool:
        return True

    def get_file(self) -> Path:
        return url_to_path(self.url)

    async def exists(self) -> bool:
        return await self._as_file_resource().exists()

    async def is_readable(self) -> bool:
        return await self._as_file_resource().is_readable()

    async def open_stream(self) -> ResourceStream:
        return await _open_file(self.get_file(), self.get_description())

    async def readable_channel(self) -> ReadableChannel:
        return FileChannel(await _open_file(self.get_file(), self.get_description()))

    async def content_length(self) -> int:
        return await self._as_file_resource().content_length()

    async def last_modified(self) -> datetime:
        return await self._as_file_resource().last_modified()


class BytesResource(Resource):
    """A resource that reads from bytes held in memory."""

    data: bytes = Field(description="Binary content of the resource")
    description: str = Field(default="resource loaded from byte array")
    resource_type: ResourceType = ResourceType.BYTES

    def get_description(self) -> str:
        return f"Byte array resource [{self.description}]"

    async def exists(self) -> bool:
        return True

    async def open_stream(self) -> ResourceStream:
        return BufferedStream(io.BytesIO(self.data), self.get_description())

    async def content_length(self) -> int:
        return len(self.data)


class StreamResource(Resource):
    """A resource over an already-open stream. It can be read once only."""

    stream: Any = Field(description="Binary file object or ResourceStream", exclude=True)
    description: str = Field(default="resource loaded through stream")
    resource_type: ResourceType = ResourceType.STREAM

    _consumed: bool = PrivateAttr(default=False)

    def get_description(self) -> str:
        return f"stream resource [{self.description}]"

    def is_open(self) -> bool:
        return True

    async def exists(self) -> bool:
        return True

    async def open_stream(self) -> ResourceStream:
        if self._consumed:
            raise StreamConsumedError(self.get_description())
        self._consumed = True
        return wrap_stream(self.stream, self.get_description())


class DescriptiveResource(Resource):
    """A placeholder that names a resource without pointing at content."""

    description: str = Field(description="What this resource stands for")
    resource_type: ResourceType = ResourceType.DESCRIPTIVE

    def get_description(self) -> str:
        return self.description

    async def exists(self) -> bool:
        return False

    async def is_readable(self) -> bool:
        return False

    async def open_stream(self) -> ResourceStream:
        raise NotFoundError(
            self.description, details={"reason": "descriptive resources cannot be opened"}
        )
