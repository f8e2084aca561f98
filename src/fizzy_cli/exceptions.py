"""Exception hierarchy for fizzy-cli.

All exceptions inherit from :class:`FizzyError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`fizzy_cli.exit_codes`.
The command group in :mod:`fizzy_cli.app` catches ``FizzyError`` around every
command and exits with the appropriate code.

Subclass hierarchy::

    FizzyError (exit 1)
    +-- UsageError        (exit 2)
    +-- NetworkError      (exit 1)
    +-- APIError          (exit 1)
    +-- DecodeError       (exit 1)
    +-- PaginationError   (exit 1)
    +-- ConfigError       (exit 1)
"""

from __future__ import annotations

from typing import Optional

from fizzy_cli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE


class FizzyError(Exception):
    """Base exception for all fizzy-cli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(FizzyError):
    """Raised for malformed invocations and missing credentials or account.

    Args:
        message: What was wrong with the invocation.
        usage: Usage text of the command that failed, printed after the
            error message. ``None`` when raised outside a command.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, message: str, usage: Optional[str] = None):
        super().__init__(message)
        self.usage = usage


class NetworkError(FizzyError):
    """Raised on transport failures (DNS resolution, connection refused, timeout)."""


class APIError(FizzyError):
    """Raised when the API answers with an HTTP status of 400 or above.

    The raw body is kept as bytes; only :meth:`__str__` decodes it.

    Args:
        status: HTTP status code.
        body: Raw response body.
    """

    def __init__(self, status: int, body: bytes = b""):
        self.status = status
        self.body = body
        super().__init__(self._message())

    def _message(self) -> str:
        text = self.body.decode("utf-8", errors="replace").strip()
        if not text:
            return f"api error: status {self.status}"
        return f"api error: status {self.status}: {text}"


class DecodeError(FizzyError):
    """Raised when a response body is not JSON or does not have the expected shape."""


class PaginationError(FizzyError):
    """Raised when a ``next`` link points back at a page already fetched."""


class ConfigError(FizzyError):
    """Raised for configuration problems (unreadable or invalid config file, bad URL)."""
