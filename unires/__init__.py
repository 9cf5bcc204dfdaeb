"""unires - uniform resource handles and prefix-dispatch loaders."""

__version__ = "0.1.0"

from .config import LoaderConfig
from .exceptions import (
    IOFailure,
    NotFoundError,
    ResolutionError,
    ResourceError,
    StreamConsumedError,
    UniresError,
    UnresolvableLocatorError,
)
from .resources import (
    CLASSPATH_URL_PREFIX,
    DefaultResourceLoader,
    Resource,
    ResourceLoader,
    get_default_loader,
)

__all__ = [
    "LoaderConfig",
    "IOFailure",
    "NotFoundError",
    "ResolutionError",
    "ResourceError",
    "StreamConsumedError",
    "UniresError",
    "UnresolvableLocatorError",
    "CLASSPATH_URL_PREFIX",
    "DefaultResourceLoader",
    "Resource",
    "ResourceLoader",
    "get_default_loader",
]
