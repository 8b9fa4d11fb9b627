"""Build Typer commands from the resource registry.

Each namespace class becomes a command group and each of its declared
methods a leaf command; a method class registered at the top level becomes
a top-level command::

    restcli account retrieve
    restcli account identity
    restcli auth check
    restcli check

The tree is built from class-level declarations (``name``, ``METHODS``,
``SPEC``), so no client or token is needed at import time. The client is
created inside the command, after the global flags have been parsed.

Every leaf accepts the same options:

* ``-d/--data key=value`` (repeatable) -- path placeholders and body/query
  parameters.
* ``--token`` -- token for this call only.
* ``--headers`` / ``--body`` -- restrict the printed output.
* ``--raw`` -- print the compact JSON body only.
* ``--fail`` -- exit non-zero on HTTP error statuses.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

import typer

from restcli.exceptions import RegistrationError
from restcli.models import MethodSpec
from restcli.resource import Method, Namespace

RequestCallback = Callable[..., None]

RESERVED_NAMES = frozenset({"login", "logout", "config"})


def attach_resource_commands(
    app: typer.Typer,
    factories: Iterable[Any],
    request_callback: RequestCallback,
) -> list[str]:
    """Add one command group or command per resource class to *app*.

    Args:
        app: The root Typer application.
        factories: Resource classes, typically
            :data:`~restcli.resources.DEFAULT_RESOURCES`. Entries that are not
            :class:`~restcli.resource.Namespace` or
            :class:`~restcli.resource.Method` subclasses are skipped.
        request_callback: Called when a generated command runs, as
            ``callback(ctx, resource_name, method_name, spec, data_pairs,
            token, show_headers, show_body, raw, fail)``. ``method_name`` is
            ``None`` for top-level methods.

    Returns:
        The names attached, in order.

    Raises:
        RegistrationError: If a resource name collides with a built-in
            command.
    """
    attached: list[str] = []
    for factory in factories:
        if not isinstance(factory, type):
            continue
        name = getattr(factory, "name", "")
        if name in RESERVED_NAMES:
            raise RegistrationError(f"Resource name '{name}' collides with a built-in command")

        if issubclass(factory, Namespace):
            group = typer.Typer(no_args_is_help=True, help=_first_line(factory.__doc__) or None)
            for method_name, spec in factory.METHODS.items():
                group.command(name=method_name, help=spec.description or None)(
                    _build_command_function(name, method_name, spec, request_callback)
                )
            app.add_typer(group, name=name, help=_first_line(factory.__doc__) or f"{name} methods.")
            attached.append(name)
        elif issubclass(factory, Method):
            spec = factory.SPEC
            app.command(name=name, help=spec.description or None)(
                _build_command_function(name, None, spec, request_callback)
            )
            attached.append(name)
    return attached


def _build_command_function(
    resource_name: str,
    method_name: Optional[str],
    spec: MethodSpec,
    request_callback: RequestCallback,
) -> Callable[..., None]:
    def command(
        ctx: typer.Context,
        data: Optional[list[str]] = typer.Option(
            None, "--data", "-d", help="Request parameter as key=value (repeatable)."
        ),
        token: Optional[str] = typer.Option(None, "--token", "-t", help="API token for this call."),
        headers: bool = typer.Option(False, "--headers", help="Print only response headers."),
        body: bool = typer.Option(False, "--body", "-b", help="Print only the response body."),
        raw: bool = typer.Option(False, "--raw", help="Print the raw JSON body."),
        fail: bool = typer.Option(False, "--fail", help="Exit non-zero on HTTP error statuses."),
    ) -> None:
        show_headers, show_body = True, True
        if headers:
            show_body = False
        elif body:
            show_headers = False
        request_callback(
            ctx,
            resource_name,
            method_name,
            spec,
            data or [],
            token,
            show_headers,
            show_body,
            raw,
            fail,
        )

    command.__name__ = f"{resource_name}_{method_name or 'call'}"
    command.__doc__ = spec.description or f"{spec.method.value} {spec.path}"
    return command


def _first_line(text: Optional[str]) -> str:
    if not text:
        return ""
    return text.strip().splitlines()[0].strip()
