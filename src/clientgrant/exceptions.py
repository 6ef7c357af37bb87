"""Errors raised by clientgrant, each tied to a process exit code.

The grant parser itself does not raise; it returns a
:class:`~clientgrant.models.DecodeFailure`. Exceptions appear at the edges:
loading configuration, reaching the network, and
:func:`~clientgrant.grant.response.raise_for_failure` for callers that
would rather handle a failed decode as an exception.

Commands catch :class:`ClientGrantError`, print it, and exit with its
``exit_code``; :func:`clientgrant.app.main` does the same for anything
that slips through.

::

    ClientGrantError      1
    ├── ConfigError       1
    ├── InvalidUsageError 2
    ├── ConnectionError_  6
    └── TokenDecodeError  3 (non-200 status) or 7 (undecodable body)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from clientgrant.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)

if TYPE_CHECKING:
    from clientgrant.models import DecodeFailure


class ClientGrantError(Exception):
    """Base class; ``exit_code`` is what the process exits with.

    Args:
        message: One-line description, printed after ``Error:``.
        exit_code: Replaces the class default for this instance.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(ClientGrantError):
    """A profile or credential source cannot be read, found or validated."""


class InvalidUsageError(ClientGrantError):
    exit_code = EXIT_INVALID_USAGE


class ConnectionError_(ClientGrantError):
    """The HTTP request to the token endpoint did not complete.

    The underscore keeps the builtin ``ConnectionError`` usable.
    """

    exit_code = EXIT_CONNECTION_ERROR


class TokenDecodeError(ClientGrantError):
    """A token response was received but did not yield a token.

    ``failure`` is the parser's :class:`~clientgrant.models.DecodeFailure`.
    A rejected grant (any non-200 status) exits with
    :data:`~clientgrant.exit_codes.EXIT_AUTH_FAILURE`, a 200 with an
    unusable body with :data:`~clientgrant.exit_codes.EXIT_DECODE_ERROR`.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(self, failure: DecodeFailure):
        from clientgrant.models import DecodeFailureKind

        rejected = failure.kind is DecodeFailureKind.UNEXPECTED_STATUS
        super().__init__(
            f"{failure.kind.value}: {failure.detail}",
            exit_code=EXIT_AUTH_FAILURE if rejected else EXIT_DECODE_ERROR,
        )
        self.failure = failure
