"""Typer application factory and CLI entry point for restcli.

This module wires together the top-level Typer application: the global
flags, the built-in ``login``, ``logout``, and ``config`` commands, and one
generated command per registered resource method (see
:mod:`restcli.generator.command_tree`).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from restcli import __version__
from restcli.commands.config import config_app
from restcli.commands.login import login_command, logout_command
from restcli.exit_codes import EXIT_GENERIC_FAILURE
from restcli.generator import attach_resource_commands
from restcli.models import MethodSpec
from restcli.resources import DEFAULT_RESOURCES


app = typer.Typer(
    name="restcli",
    help="Command-line client for the API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"restcli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="API base URL (overrides config and RESTCLI_BASE_URL)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~restcli.output.OutputManager` and stores
    the resolved :class:`~restcli.models.GlobalConfig` in ``ctx.obj`` for
    the sub-commands. ``--json`` and ``--plain`` override the configured
    ``output.format``; ``output.color = false`` acts like ``--no-color``.
    """
    from restcli.config import resolve_config
    from restcli.exceptions import ConfigError
    from restcli.output import OutputFormat, OutputManager, error, set_output

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(cli_base_url=base_url, cli_format=cli_format)
    except ConfigError as exc:
        set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    set_output(
        OutputManager(
            format=OutputFormat(config.output.format),
            no_color=no_color or not config.output.color,
            quiet=quiet,
            verbose=verbose,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def run_resource_command(
    ctx: typer.Context,
    resource_name: str,
    method_name: Optional[str],
    spec: MethodSpec,
    data_pairs: list[str],
    token: Optional[str],
    show_headers: bool,
    show_body: bool,
    raw: bool,
    fail: bool,
) -> None:
    """Request callback for generated resource commands."""
    from restcli.commands import common
    from restcli.config import load_token
    from restcli.exceptions import RestcliError

    try:
        data = common.parse_data_pairs(data_pairs)
        stored = None if token else load_token()
        resolved = common.resolve_token(spec, token, stored)
        response = common.call_method(ctx.obj["config"], resolved, resource_name, method_name, data)
    except RestcliError as exc:
        common.fail(exc)

    common.render_response(response, show_headers=show_headers, show_body=show_body, raw=raw)

    if fail:
        try:
            common.raise_for_status(response)
        except RestcliError as exc:
            common.fail(exc)


app.command("login")(login_command)
app.command("logout")(logout_command)
app.add_typer(config_app, name="config", help="Configuration management.")
attach_resource_commands(app, DEFAULT_RESOURCES, run_resource_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from restcli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``restcli`` console script.

    :class:`~restcli.exceptions.RestcliError` instances that escape a
    command cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from restcli.exceptions import RestcliError
        from restcli.output import error

        if isinstance(exc, RestcliError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
