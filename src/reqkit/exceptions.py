"""Exception hierarchy for reqkit.

All exceptions inherit from :class:`ReqkitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`reqkit.exit_codes`.
The CLI entry point :func:`reqkit.app.main` catches ``ReqkitError`` and
exits with the matching code.

Subclass hierarchy::

    ReqkitError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- RequestBuildError      (exit 2)   never retried
    +-- AttemptError           (exit 1)   retried by Request.execute
    |   +-- Not200Error        (exit 5)
    |   +-- ConnectionError_   (exit 6)
    |   +-- BodyReadError      (exit 7)
    +-- ConfigError            (exit 1)
"""

from __future__ import annotations

from reqkit.exit_codes import (
    EXIT_BODY_READ_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_STATUS_ERROR,
)


class ReqkitError(Exception):
    """Base exception for all reqkit errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`reqkit.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ReqkitError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class RequestBuildError(ReqkitError):
    """Raised when a request cannot be built (unsupported method, bad URL, negative retry count).

    Build errors abort execution on the first attempt and are never retried.
    """

    exit_code = EXIT_INVALID_USAGE


class AttemptError(ReqkitError):
    """Base class for failures of a single attempt.

    All subclasses share one retry budget and one backoff schedule in
    :meth:`~reqkit.client.request.Request.execute`.
    """


class Not200Error(AttemptError):
    """Raised when the server answers with any status code other than 200.

    Every non-200 code (3xx, 4xx, 5xx) maps to this one class; the actual
    code is kept on :attr:`status_code` for display only.
    """

    exit_code = EXIT_STATUS_ERROR

    def __init__(self, status_code: int):
        super().__init__(f"status code != 200 (got {status_code})")
        self.status_code = status_code


class ConnectionError_(AttemptError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class BodyReadError(AttemptError):
    """Raised when the response body stream fails before it is fully read."""

    exit_code = EXIT_BODY_READ_ERROR


class ConfigError(ReqkitError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
