"""Utility functions for resource locations."""

import hashlib
import mimetypes
import re
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse
from urllib.request import url2pathname

if TYPE_CHECKING:
    from .base import Resource

FILE_URL_SCHEME = "file"
HTTP_URL_SCHEMES = frozenset({"http", "https"})
URL_SCHEMES = frozenset({FILE_URL_SCHEME}) | HTTP_URL_SCHEMES

# RFC 3986 scheme syntax
SCHEME_PATTERN = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")


def get_scheme(location: str) -> str | None:
    """Extract the lower-cased scheme of a location, if it has one.

    Single-letter schemes are Windows drive letters and do not count.
    """
    match = SCHEME_PATTERN.match(location)
    if not match or len(match.group(1)) == 1:
        return None
    return match.group(1).lower()


def is_url(location: str) -> bool:
    """Check whether a location is a URL with a recognized scheme.

    ``http``/``https`` URLs need an authority, ``file`` URLs need a path.
    """
    scheme = get_scheme(location)
    if scheme not in URL_SCHEMES:
        return False
    parsed = urlparse(location)
    if scheme in HTTP_URL_SCHEMES:
        return bool(parsed.netloc)
    return bool(parsed.path or parsed.netloc)


def is_file_url(location: str) -> bool:
    """Check whether a location is a ``file:`` URL."""
    return get_scheme(location) == FILE_URL_SCHEME


def url_to_path(url: str) -> Path:
    """Convert a ``file:`` URL to a path, decoding percent-escapes."""
    parsed = urlparse(url)
    path = url2pathname(parsed.path)
    if parsed.netloc and parsed.netloc != "localhost":
        return Path(f"//{parsed.netloc}{path}")
    return Path(path)


def guess_mime_type(resource: "Resource") -> str | None:
    """Guess a MIME type from the resource's filename."""
    filename = resource.get_filename()
    if not filename:
        return None
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type


def calculate_content_hash(content: str | bytes) -> str:
    """Calculate SHA-256 hash of content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()
