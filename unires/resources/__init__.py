"""Resource abstraction and loaders for unires."""

from .base import Resource, ResourceType
from .context import LookupContext
from .loader import (
    CLASSPATH_URL_PREFIX,
    DefaultResourceLoader,
    FileSystemResourceLoader,
    PackageRelativeResourceLoader,
    ResourceLoader,
    get_default_loader,
)
from .paths import apply_relative_path, clean_path, get_filename
from .streams import ReadableChannel, ResourceStream
from .types import (
    BytesResource,
    ClasspathResource,
    DescriptiveResource,
    FileResource,
    FileUrlResource,
    StreamResource,
    UrlResource,
)
from .utils import calculate_content_hash, guess_mime_type, is_url

__all__ = [
    "Resource",
    "ResourceType",
    "LookupContext",
    "CLASSPATH_URL_PREFIX",
    "DefaultResourceLoader",
    "FileSystemResourceLoader",
    "PackageRelativeResourceLoader",
    "ResourceLoader",
    "get_default_loader",
    "apply_relative_path",
    "clean_path",
    "get_filename",
    "ReadableChannel",
    "ResourceStream",
    "BytesResource",
    "ClasspathResource",
    "DescriptiveResource",
    "FileResource",
    "FileUrlResource",
    "StreamResource",
    "UrlResource",
    "calculate_content_hash",
    "guess_mime_type",
    "is_url",
]
