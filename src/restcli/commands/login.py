"""Login commands -- verify a bearer token and persist it for later calls.

Typical workflow::

    restcli login --token token_abc123   # verify and store
    restcli auth check                   # uses the stored token
    restcli logout                       # forget it

Password and OAuth logins are not implemented; ``--username`` is accepted
only to report that.
"""

from __future__ import annotations

from typing import Optional

import typer

from restcli.exceptions import AuthError, ConfigError, InvalidUsageError, RestcliError
from restcli.output import format_response, info, print_data, success, suggest


def login_command(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(None, "--token", "-t", help="API token."),
    username: Optional[str] = typer.Option(
        None, "--username", "-u", help="Username or e-mail (not supported yet)."
    ),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Password (not supported yet)."
    ),
    raw: bool = typer.Option(False, "--raw", help="Print the raw token on success."),
) -> None:
    """Set up authentication.

    Calls ``auth check`` with the token. A 401 answer exits with the auth
    failure code and nothing is stored; any other answer stores the token
    in the data directory with owner-only permissions.

    Example::

        restcli login --token token_abc123
        restcli login --token token_abc123 --raw > token.txt
    """
    from restcli import config as config_mod
    from restcli.commands import common

    if username is not None:
        if password is None:
            common.fail(InvalidUsageError("When using --username you must also pass --password."))
        common.fail(
            InvalidUsageError("Password authentication is not currently supported. Please use --token.")
        )
    if not token:
        common.fail(InvalidUsageError("Interactive login is not currently supported. Please use --token."))

    config = ctx.obj["config"]
    try:
        response = common.check_token(config, token)
    except RestcliError as exc:
        common.fail(exc)

    if response.status == 401:
        if not raw:
            format_response(response.json())
        common.fail(AuthError("The specified token is invalid."))

    try:
        path = config_mod.save_token(token)
    except OSError as exc:
        common.fail(ConfigError(f"Could not write token file: {exc}"))

    if raw:
        print_data(token)
    else:
        success("Authentication successful.")
        info(f"Token stored at {path}")


def logout_command() -> None:
    """Forget the stored token.

    Example::

        restcli logout
    """
    from restcli.config import delete_token

    if delete_token():
        success("Stored token removed.")
    else:
        info("No stored token.")
        suggest("Run 'restcli login --token <token>' to store one.")
