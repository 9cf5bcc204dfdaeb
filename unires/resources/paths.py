"""Path-segment helpers shared by the resource backends.

All helpers work on ``/``-separated strings. Backslashes are treated as
separators so that Windows-style locations compose the same way.
"""

import re

FOLDER_SEPARATOR = "/"
WINDOWS_FOLDER_SEPARATOR = "\\"
CURRENT_PATH = "."
TOP_PATH = ".."
EXTENSION_SEPARATOR = "."

# "file:", "C:", "jar:file:" but not "a/b:c"
_PREFIX_PATTERN = re.compile(r"^[^/]*:")
_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:/")


def normalize_separators(path: str) -> str:
    """Replace Windows separators with ``/``."""
    return path.replace(WINDOWS_FOLDER_SEPARATOR, FOLDER_SEPARATOR)


def is_absolute_path(path: str) -> bool:
    """Check whether a path is rooted (``/x`` or ``C:/x``)."""
    path = normalize_separators(path)
    return path.startswith(FOLDER_SEPARATOR) or bool(_DRIVE_PATTERN.match(path))


def clean_path(path: str) -> str:
    """Normalize a path by folding ``.`` and ``..`` segments.

    A leading prefix such as ``file:`` or ``C:`` and any leading slashes
    are preserved as-is. Leading ``..`` segments of a relative path are
    kept since they cannot be folded. ``..`` above an absolute root is
    dropped. A trailing slash survives normalization.

    Args:
        path: The path to clean

    Returns:
        The normalized path
    """
    if not path:
        return path

    normalized = normalize_separators(path)

    prefix = ""
    if match := _PREFIX_PATTERN.match(normalized):
        prefix = match.group(0)
        normalized = normalized[len(prefix):]

    stripped = normalized.lstrip(FOLDER_SEPARATOR)
    prefix += normalized[: len(normalized) - len(stripped)]
    rooted = prefix.endswith(FOLDER_SEPARATOR)
    trailing = stripped.endswith(FOLDER_SEPARATOR)

    segments: list[str] = []
    for segment in stripped.split(FOLDER_SEPARATOR):
        if segment in ("", CURRENT_PATH):
            continue
        if segment == TOP_PATH:
            if segments and segments[-1] != TOP_PATH:
                segments.pop()
            elif not rooted:
                segments.append(TOP_PATH)
            continue
        segments.append(segment)

    cleaned = prefix + FOLDER_SEPARATOR.join(segments)
    if trailing and segments:
        cleaned += FOLDER_SEPARATOR
    return cleaned


def apply_relative_path(path: str, relative_path: str) -> str:
    """Resolve ``relative_path`` against ``path``.

    ``path`` is taken to name a file unless it ends with a separator, so
    the relative path is resolved against its parent folder. An absolute
    ``relative_path`` replaces the base entirely.

    >>> apply_relative_path("a/b/c.txt", "../d.txt")
    'a/d.txt'
    """
    relative_path = normalize_separators(relative_path)
    if is_absolute_path(relative_path):
        return clean_path(relative_path)

    path = normalize_separators(path)
    separator_index = path.rfind(FOLDER_SEPARATOR)
    if separator_index == -1:
        return clean_path(relative_path)
    return clean_path(path[: separator_index + 1] + relative_path)


def escapes_root(path: str) -> bool:
    """Check whether a cleaned relative path climbs above its root."""
    cleaned = clean_path(path)
    return cleaned == TOP_PATH or cleaned.startswith(TOP_PATH + FOLDER_SEPARATOR)


def get_filename(path: str | None) -> str | None:
    """Extract the last segment of a path, e.g. ``"a/b/c.txt" -> "c.txt"``."""
    if not path:
        return None
    filename = normalize_separators(path).rsplit(FOLDER_SEPARATOR, 1)[-1]
    return filename or None


def get_filename_extension(path: str | None) -> str | None:
    """Extract the extension of the last segment, e.g. ``"a/b.txt" -> "txt"``."""
    filename = get_filename(path)
    if not filename:
        return None
    index = filename.rfind(EXTENSION_SEPARATOR)
    if index <= 0:
        return None
    return filename[index + 1:]


def strip_filename_extension(path: str) -> str:
    """Strip the extension of the last segment, e.g. ``"a/b.txt" -> "a/b"``."""
    extension = get_filename_extension(path)
    if extension is None:
        return path
    return path[: -(len(extension) + 1)]
