"""Exception hierarchy for pons-cli.

All exceptions inherit from :class:`PonsError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`pons_cli.exit_codes`.
The REPL catches ``PonsError`` at the command-dispatch boundary and prints
it; one-shot commands exit with the error's code.

Subclass hierarchy::

    PonsError (exit 1)
    +-- ConfigError            (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- NetworkError           (exit 6)
    |   +-- AuthError          (exit 3)
    +-- DeserializationError   (exit 7)
    +-- CacheWriteError        (exit 1, never surfaces to the user)
    +-- HistoryError           (exit 1)

An empty translation result (HTTP 204) is not an exception; the pipeline
returns ``None`` for it.
"""

from __future__ import annotations

from typing import Optional

from pons_cli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DATA_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class PonsError(Exception):
    """Base exception for all pons-cli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(PonsError):
    """Raised when config, cache, or data directories cannot be created, or the config file is invalid."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(PonsError):
    """Raised for invalid command arguments, unknown dictionaries, or a missing dictionary selection."""

    exit_code = EXIT_INVALID_USAGE


class NetworkError(PonsError):
    """Raised on transport failures or when the API answers with an unexpected status.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status code, when the failure came from a
            response rather than the transport.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(NetworkError):
    """Raised when the API rejects the configured key (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class DeserializationError(PonsError):
    """Raised when a cached or fetched payload is not a valid response document."""

    exit_code = EXIT_DATA_ERROR


class CacheWriteError(PonsError):
    """Raised by :meth:`~pons_cli.cache.ResponseCache.write` when a cache file cannot be written.

    Callers run cache writes through :func:`~pons_cli.pipeline.best_effort`,
    so this error is logged and never reaches the user.
    """


class HistoryError(PonsError):
    """Raised when the search history database cannot be read or written."""

    exit_code = EXIT_GENERIC_FAILURE
