"""Shared runtime for CLI commands: client construction, calls, and rendering.

Every generated resource command and the ``login`` command go through this
module, so tests can swap :func:`make_client` for one built on
:class:`httpx.MockTransport`.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Iterable, NoReturn, Optional

import typer

from restcli.client import ApiClient, ApiResponse
from restcli.exceptions import (
    AuthError,
    InvalidUsageError,
    NotFoundError,
    RestcliError,
    ServerError,
)
from restcli.models import GlobalConfig, MethodSpec
from restcli.output import (
    error,
    format_response,
    get_output,
    print_data,
    success,
    suggest,
)
from restcli.resource import Method, Namespace

ANONYMOUS_TOKEN = "token_null"


def fail(exc: RestcliError) -> NoReturn:
    """Print *exc* and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def parse_data_pairs(pairs: Iterable[str]) -> dict[str, Any]:
    """Parse repeated ``key=value`` arguments into a parameter mapping.

    Values that parse as JSON (``3``, ``true``, ``[1,2]``, ``{"a":1}``) keep
    their JSON type; anything else is taken as a string.

    Raises:
        InvalidUsageError: If an item has no ``=`` or an empty key.
    """
    data: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InvalidUsageError(f"Expected key=value, got: {pair!r}")
        try:
            data[key] = json.loads(value)
        except json.JSONDecodeError:
            data[key] = value
    return data


def make_client(config: GlobalConfig, token: str) -> ApiClient:
    """Build a client from the resolved configuration."""
    return ApiClient(
        config.base_url,
        token,
        product=config.user_agent,
        timeout=config.timeout,
        verify_ssl=config.verify_ssl,
        token_prefixes=config.token_prefixes,
    )


def resolve_token(spec: MethodSpec, explicit: Optional[str], stored: Optional[str]) -> str:
    """Pick the token for one call: ``--token`` first, then the stored token.

    Methods that do not require authentication fall back to an anonymous
    placeholder token.

    Raises:
        AuthError: If the method requires a token and none is available.
    """
    token = explicit or stored
    if token:
        return token
    if not spec.auth_required:
        return ANONYMOUS_TOKEN
    raise AuthError(
        "You are not authenticated. Pass --token, or run 'restcli login --token <token>' "
        "to authenticate all future requests."
    )


def lookup_method(client: ApiClient, resource_name: str, method_name: Optional[str]) -> Method:
    """Find the bound method for a generated command."""
    resource = client.resource(resource_name)
    if isinstance(resource, Namespace):
        if method_name is None:
            raise NotFoundError(f"'{resource_name}' is a namespace; name one of its methods")
        return resource.require_method(method_name)
    return resource


async def _call(
    config: GlobalConfig,
    token: str,
    resource_name: str,
    method_name: Optional[str],
    data: dict[str, Any],
) -> ApiResponse:
    async with make_client(config, token) as client:
        method = lookup_method(client, resource_name, method_name)
        return await method.invoke(data)


def call_method(
    config: GlobalConfig,
    token: str,
    resource_name: str,
    method_name: Optional[str],
    data: dict[str, Any],
) -> ApiResponse:
    """Run one method call to completion, showing a spinner meanwhile."""
    with get_output().spinner("Sending request..."):
        return asyncio.run(_call(config, token, resource_name, method_name, data))


async def _check_token(config: GlobalConfig, token: str) -> ApiResponse:
    async with make_client(config, token) as client:
        return await lookup_method(client, "auth", "check").invoke()


def check_token(config: GlobalConfig, token: str) -> ApiResponse:
    """Call ``auth check`` with *token* and return the response."""
    with get_output().spinner("Authenticating..."):
        return asyncio.run(_check_token(config, token))


def render_response(
    response: ApiResponse,
    show_headers: bool = True,
    show_body: bool = True,
    raw: bool = False,
) -> None:
    """Print a response: status line to stderr, headers and body to stdout.

    With *raw* only the compact JSON body is printed.
    """
    if raw:
        print_data(json.dumps(response.json(), ensure_ascii=False))
        return

    status_line = f"{response.status}: {response.status_text}"
    if response.status < 400:
        success(status_line)
    else:
        error(status_line)

    output = get_output()
    if show_headers:
        output.print_headers(response.headers)
        if show_body:
            print_data("")
    if show_body:
        format_response(response.json())


def raise_for_status(response: ApiResponse) -> None:
    """Map an error status to the matching exception (used by ``--fail``)."""
    status = response.status
    if status < 400:
        return
    message = f"HTTP {status} {response.status_text}".rstrip()
    detail = response.get("message") or response.get("error") or response.get("detail")
    if detail:
        message = f"{message}: {detail}"
    if status in (401, 403):
        suggest("Run 'restcli login --token <token>' to store a valid token.")
        raise AuthError(message)
    if status == 404:
        raise NotFoundError(message)
    if status >= 500:
        raise ServerError(message)
    raise RestcliError(message)
