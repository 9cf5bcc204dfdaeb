"""Custom exceptions for unires."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class UniresError(Exception):
    """Base exception class for all unires related errors."""

    def __init__(
        self,
        message: str = "An error occurred in unires",
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the exception with optional details and cause.

        Args:
            message: Human-readable error description
            details: Additional context about the error
            cause: The original exception that caused this one
        """
        self.message = message
        self.details = details or {}
        self.cause = cause

        self._log_error()

        full_message = self._build_message()
        super().__init__(full_message)

    def _build_message(self) -> str:
        """Build a detailed error message from all available information."""
        message_parts = [self.message]

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            message_parts.append(f"Details: {details_str}")

        if self.cause:
            cause_info = f"{type(self.cause).__name__}: {str(self.cause)}"
            message_parts.append(f"Caused by: {cause_info}")

        return " | ".join(message_parts)

    def _log_error(self) -> None:
        """Log detailed error information."""
        logger.debug(
            "%s: %s",
            self.__class__.__name__,
            self.message,
            exc_info=self.cause,
        )


class ResourceError(UniresError):
    """Raised when there are issues with resource operations."""

    def __init__(
        self,
        message: str = "Resource operation failed",
        location: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize with resource-specific context.

        Args:
            message: Error description
            location: Description of the resource involved
            **kwargs: Additional details to include
        """
        details = kwargs.pop("details", {})
        if location:
            details["location"] = location
        self.location = location
        super().__init__(message, details=details, **kwargs)


class NotFoundError(ResourceError):
    """Raised when the backend confirms that a resource does not exist."""

    def __init__(self, location: str, **kwargs: Any) -> None:
        super().__init__(f"Resource not found: {location}", location=location, **kwargs)


class ResolutionError(ResourceError):
    """Raised when a locator cannot be composed or a property determined."""

    def __init__(
        self, location: str, reason: str = "cannot be resolved", **kwargs: Any
    ) -> None:
        self.reason = reason
        super().__init__(f"{location} {reason}", location=location, **kwargs)


class UnresolvableLocatorError(ResolutionError):
    """Raised when a resource has no URL, URI or file-system form."""

    def __init__(self, location: str, form: str = "URL", **kwargs: Any) -> None:
        self.form = form
        super().__init__(
            location, reason=f"cannot be resolved to a {form}", **kwargs
        )


class IOFailure(ResourceError):
    """Raised when reading an existing resource fails."""

    def __init__(self, location: str, error: Exception) -> None:
        super().__init__(
            f"Error reading resource {location}: {error}",
            location=location,
            cause=error,
        )


class StreamConsumedError(ResourceError):
    """Raised when a single-use stream resource is opened a second time."""

    def __init__(self, location: str) -> None:
        super().__init__(
            f"{location}: stream has already been read; "
            "do not use an open-stream resource if it is read more than once",
            location=location,
        )
