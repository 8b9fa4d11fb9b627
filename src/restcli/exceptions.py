"""Exception hierarchy for restcli.

All exceptions inherit from :class:`RestcliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`restcli.exit_codes`.
The top-level error handler in :func:`restcli.app.main` catches
``RestcliError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The client core never raises for an HTTP status code. A 401 or a 500 with a
JSON body is returned as a normal :class:`~restcli.client.ApiResponse`; only
transport failures and undecodable bodies become exceptions.

Subclass hierarchy::

    RestcliError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- AuthError               (exit 3)
    +-- NotFoundError           (exit 4)
    |   +-- ResourceNotFoundError
    |   +-- MethodNotFoundError
    +-- ServerError             (exit 5)
    +-- ConnectionError_        (exit 6)
    +-- ResponseDecodeError     (exit 8)
    +-- RegistrationError       (exit 1)
    +-- ConfigError             (exit 1)
"""

from __future__ import annotations

from restcli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class RestcliError(Exception):
    """Base exception for all restcli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`restcli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RestcliError):
    """Raised for invalid CLI arguments or request parameters that cannot be encoded."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(RestcliError):
    """Raised by the CLI when no token is available or the API rejects it."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(RestcliError):
    """Raised when a name lookup on the client fails."""

    exit_code = EXIT_NOT_FOUND


class ResourceNotFoundError(NotFoundError):
    """Raised when no namespace or method is registered under the requested name."""


class MethodNotFoundError(NotFoundError):
    """Raised when a namespace has no method registered under the requested name."""


class ServerError(RestcliError):
    """Raised by the CLI when the API answers with an HTTP 5xx status."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(RestcliError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ResponseDecodeError(RestcliError):
    """Raised when a response body is not valid JSON.

    Kept distinct from :class:`ConnectionError_`: the request reached the
    server and a status line came back, but the payload cannot be wrapped.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the undecodable response.
        body_excerpt: The first characters of the raw body text.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(self, message: str, status_code: int, body_excerpt: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body_excerpt = body_excerpt


class RegistrationError(RestcliError):
    """Raised when two resources are registered on a client under the same name."""

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(RestcliError):
    """Raised for configuration problems (invalid JSON, unreadable token file)."""

    exit_code = EXIT_GENERIC_FAILURE
