"""Exception hierarchy for wanikani.

All exceptions inherit from :class:`WaniKaniError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`wanikani.exit_codes`.
The CLI entry point in :func:`wanikani.app.main` catches ``WaniKaniError``
and exits with the appropriate code.

Transport failures (DNS, refused connections, timeouts) are *not* wrapped:
the original :class:`httpx.TransportError` reaches the caller untouched.
Cache-layer failures never surface at all.

Subclass hierarchy::

    WaniKaniError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- ConfigError              (exit 1)
    +-- CacheInconsistencyError  (exit 1)
    +-- ResponseFormatError      (exit 1)
    +-- HTTPStatusError          (exit 1)
        +-- AuthError            (exit 3)
        +-- NotFoundError        (exit 4)
        +-- RateLimitError       (exit 8)
        +-- ServerError          (exit 5)
"""

from wanikani.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_RATE_LIMITED,
    EXIT_SERVER_ERROR,
)


class WaniKaniError(Exception):
    """Base exception for all wanikani errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`wanikani.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(WaniKaniError):
    """Raised for invalid arguments (negative TTL, unknown resource name)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(WaniKaniError):
    """Raised for configuration problems (missing API key, invalid config JSON)."""

    exit_code = EXIT_GENERIC_FAILURE


class CacheInconsistencyError(WaniKaniError):
    """Raised when the server answers 304 Not Modified but no cache entry exists.

    The conditional headers are only attached when an entry was found, so
    this means the cache and the server disagree (for example the entry was
    deleted between the lookup and the response).  It is never papered over
    with an empty payload.
    """


class ResponseFormatError(WaniKaniError):
    """Raised when a 2xx response body is not JSON or is not a valid envelope."""


class HTTPStatusError(WaniKaniError):
    """Raised when the API answers with a status other than 2xx or 304.

    Args:
        message: Human-readable error description.
        status_code: The numeric HTTP status of the response.
    """

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class AuthError(HTTPStatusError):
    """Raised when the API rejects the API key (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(HTTPStatusError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class RateLimitError(HTTPStatusError):
    """Raised when the API returns HTTP 429 (too many requests)."""

    exit_code = EXIT_RATE_LIMITED


class ServerError(HTTPStatusError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR
