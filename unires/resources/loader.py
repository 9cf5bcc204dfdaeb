"""Resource loaders: turn location strings into resources."""

import abc
import functools
import logging
from pathlib import Path

from ..config import LoaderConfig
from .base import Resource
from .context import LookupContext
from .paths import FOLDER_SEPARATOR, clean_path, is_absolute_path
from .types import ClasspathResource, FileResource, FileUrlResource, UrlResource
from .utils import is_file_url, is_url

logger = logging.getLogger(__name__)

CLASSPATH_URL_PREFIX = "classpath:"


class ResourceLoader(abc.ABC):
    """Strategy for resolving location strings to resources.

    ``get_resource`` only builds a handle: it does no I/O and does not
    raise for missing content. Failures surface when a capability method
    is called on the returned resource.
    """

    @abc.abstractmethod
    def get_resource(self, location: str) -> Resource:
        """Get a resource handle for a location."""

    @abc.abstractmethod
    def get_lookup_context(self) -> LookupContext | None:
        """Get the namespace used for ``classpath:`` locations."""


class DefaultResourceLoader(ResourceLoader):
    """Loader that dispatches on the location prefix.

    Resolution order:

    1. ``classpath:name`` resolves ``name`` as an embedded package asset,
       whatever ``name`` looks like.
    2. A ``file:``, ``http:`` or ``https:`` URL resolves to a URL resource.
       ``file:`` URLs are file-backed so that ``get_file()`` works.
    3. Anything else is a path, resolved by ``get_resource_by_path``
       against the ambient base path.
    """

    def __init__(
        self,
        base_path: Path | str | None = None,
        lookup_context: LookupContext | None = None,
        config: LoaderConfig | None = None,
    ) -> None:
        self.config = config or LoaderConfig()
        if base_path is None:
            base_path = self.config.base_path
        self.base_path = Path(base_path) if base_path is not None else None
        self.lookup_context = lookup_context or LookupContext(
            anchor=self.config.classpath_anchor
        )

    @classmethod
    def from_config(cls, config: LoaderConfig) -> "DefaultResourceLoader":
        return cls(config=config)

    def get_lookup_context(self) -> LookupContext | None:
        return self.lookup_context

    def get_resource(self, location: str) -> Resource:
        if not isinstance(location, str):
            raise TypeError(f"Location must be a string, got {type(location).__name__}")

        if location.startswith(CLASSPATH_URL_PREFIX):
            logger.debug("Resolving %s as an embedded asset", location)
            return ClasspathResource(
                path=location[len(CLASSPATH_URL_PREFIX):],
                context=self.lookup_context,
            )

        if is_url(location):
            logger.debug("Resolving %s as a URL", location)
            if is_file_url(location):
                return FileUrlResource(url=location)
            return UrlResource(
                url=location,
                headers=self.config.http_headers,
                timeout=self.config.http_timeout,
                max_redirects=self.config.max_redirects,
            )

        logger.debug("Resolving %s as a path", location)
        return self.get_resource_by_path(location)

    def get_resource_by_path(self, path: str) -> Resource:
        """Resolve a plain path against the ambient base path.

        Without a base path the path stays relative and resolves against the
        working directory when the resource is accessed. A trailing separator
        marks the resource as a folder for relative resolution.
        """
        if self.base_path is not None and not is_absolute_path(path):
            base = self.base_path.as_posix().rstrip(FOLDER_SEPARATOR)
            path = f"{base}{FOLDER_SEPARATOR}{path}"
        return FileResource(path=clean_path(path))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(base_path={self.base_path!r}, "
            f"lookup_context={self.lookup_context!r})"
        )


class FileSystemResourceLoader(DefaultResourceLoader):
    """Loader that treats every plain path as relative to its base path.

    Unlike ``DefaultResourceLoader``, a leading slash does not make a path
    absolute: ``"/conf/app.yaml"`` resolves to ``<base>/conf/app.yaml``.
    """

    def get_resource_by_path(self, path: str) -> Resource:
        return super().get_resource_by_path(path.lstrip(FOLDER_SEPARATOR))


class PackageRelativeResourceLoader(DefaultResourceLoader):
    """Loader that resolves plain paths as assets of an anchor package.

    ``classpath:`` locations still resolve against the loader's lookup
    context.
    """

    def __init__(
        self,
        anchor: str,
        lookup_context: LookupContext | None = None,
        config: LoaderConfig | None = None,
    ) -> None:
        super().__init__(lookup_context=lookup_context, config=config)
        self.anchor = anchor
        self.package_context = LookupContext(anchor=anchor)

    def get_resource_by_path(self, path: str) -> Resource:
        return ClasspathResource(path=path, context=self.package_context)


@functools.cache
def get_default_loader() -> DefaultResourceLoader:
    """Get the process-wide loader, configured from the environment."""
    return DefaultResourceLoader.from_config(LoaderConfig.from_env())
