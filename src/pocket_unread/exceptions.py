"""Custom exception hierarchy for pocket-unread.

All exceptions that cross layer boundaries must inherit from
:class:`PocketUnreadError`.  Raw third-party exceptions (``requests``,
``OSError``, ``json``) must NEVER propagate beyond the infrastructure
layer — they must be caught and re-raised as a typed subclass defined
here.

Hierarchy
---------
PocketUnreadError
├── ConfigError
├── NetworkError
├── RemoteError
├── DecodeError
└── StorageError
"""

from __future__ import annotations


class PocketUnreadError(Exception):
    """Base exception for all pocket-unread errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigError(PocketUnreadError):
    """Raised when the consumer key or the callback port is missing or invalid."""


# --- Remote service --------------------------------------------------------

class NetworkError(PocketUnreadError):
    """Raised on transport-level failures (DNS, refused connection, timeout).

    Also raised when the local callback port cannot be bound.
    """


class RemoteError(PocketUnreadError):
    """Raised when Pocket answers with a non-200 status.

    The status code and the ``X-Error`` header are kept verbatim.
    """

    def __init__(
        self,
        status: int,
        service_error: str,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            f"Unexpected response code: {status}, X-Error: {service_error}",
            hint=hint,
        )
        self.status: int = status
        self.service_error: str = service_error


class DecodeError(PocketUnreadError):
    """Raised when a response body or the credential file is not the expected JSON."""


# --- Local storage ---------------------------------------------------------

class StorageError(PocketUnreadError):
    """Raised when the credential file or its directory cannot be read or written."""
