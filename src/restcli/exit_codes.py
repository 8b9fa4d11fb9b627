"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~restcli.exceptions.RestcliError` subclass.
Shell wrappers can inspect the exit code to tell a rejected token from a
network outage without parsing stderr.

Example::

    $ restcli auth check
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the API answered 401
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or unencodable parameters."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the bearer token, or no token is available."""

EXIT_NOT_FOUND = 4
"""A resource or method name is not registered on the client."""

EXIT_SERVER_ERROR = 5
"""The remote API answered with an HTTP 5xx status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 8
"""The API answered with a body that is not valid JSON."""
