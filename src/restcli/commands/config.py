"""Config commands -- view and modify the global configuration.

Provides the ``restcli config`` sub-command group for reading, updating,
and resetting :class:`~restcli.models.GlobalConfig`. Settings are persisted
in the restcli config directory and supply the base URL, User-Agent
product, and request defaults.
"""

from __future__ import annotations

import json

import typer

from restcli.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Prints the config directory path, then the configuration after project
    config, environment variables, and ``--base-url`` have been applied.

    Example::

        restcli config show
        restcli --json config show
    """
    from restcli.config import get_config_dir, resolve_config

    config = (ctx.obj or {}).get("config") or resolve_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'output.format')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to the type of
    the existing field (bool, int, list, or str), and the result is
    validated against :class:`~restcli.models.GlobalConfig` before saving.

    Example::

        restcli config set base_url https://api.example.com
        restcli config set verify_ssl false
        restcli config set token_prefixes '["token_", "pat_"]'
    """
    from restcli.config import load_global_config, save_global_config
    from restcli.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    elif isinstance(current, list):
        try:
            coerced = json.loads(value)
        except json.JSONDecodeError:
            coerced = [item.strip() for item in value.split(",") if item.strip()]
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Example::

        restcli config reset --force
    """
    from restcli.config import save_global_config
    from restcli.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
