"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent state of the ``restcli`` command-line
tool. The client core in :mod:`restcli.client` never imports it: a client is
built from plain values (base URL, token) that the CLI resolves here.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.restcli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- a single :class:`~restcli.models.GlobalConfig` JSON
  file storing the base URL, User-Agent product, and request defaults.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config.
* **Token file** -- :func:`load_token`, :func:`save_token`, and
  :func:`delete_token` persist the bearer token with ``0o600`` permissions.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from restcli.exceptions import ConfigError
from restcli.models import GlobalConfig

_APP_NAME = "restcli"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "restcli.json"
_TOKEN_FILENAME = "token"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/restcli/`` (default ``~/.config/restcli/``).
    On macOS/Windows: ``~/.restcli/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (token file, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/restcli/`` (default ``~/.local/share/restcli/``).
    On macOS/Windows: ``~/.restcli/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives next to *path* so that ``os.replace`` is an
    atomic rename on POSIX. When *mode* is given it is applied to the temp
    file before the rename, so the final file never exists with looser
    permissions.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        if mode is not None:
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~restcli.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local overrides from ``./restcli.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not a valid JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_base_url``, ``cli_format``)
        2. Environment variables (``RESTCLI_BASE_URL``)
        3. Project config (``./restcli.json``)
        4. User config (``~/.config/restcli/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~restcli.models.GlobalConfig`. It is never
        written back to disk.
    """
    config = load_global_config()

    project = load_project_config()
    if project:
        merged = config.model_dump(mode="json")
        merged.update(project)
        try:
            config = GlobalConfig.model_validate(merged)
        except ValueError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    env_base_url = os.environ.get("RESTCLI_BASE_URL")
    if cli_base_url is not None:
        config.base_url = cli_base_url
    elif env_base_url:
        config.base_url = env_base_url

    if cli_format is not None:
        config.output.format = cli_format

    return config


# --- Token file ---


def token_path() -> Path:
    """Location of the persisted bearer token."""
    return get_data_dir() / _TOKEN_FILENAME


def load_token() -> Optional[str]:
    """Return the bearer token to use, or ``None`` when none is configured.

    ``RESTCLI_TOKEN`` wins over the token file.

    Raises:
        ConfigError: If the token file exists but cannot be read.
    """
    env_token = os.environ.get("RESTCLI_TOKEN")
    if env_token:
        return env_token.strip()
    path = token_path()
    if not path.is_file():
        return None
    try:
        token = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(f"Cannot read token file {path}: {exc}") from exc
    return token or None


def save_token(token: str) -> Path:
    """Persist *token* atomically with owner-only permissions.

    Returns:
        The path the token was written to.
    """
    path = token_path()
    _atomic_write(path, token.strip() + "\n", mode=0o600)
    return path


def delete_token() -> bool:
    """Remove the token file. Returns ``True`` if a file was deleted."""
    path = token_path()
    if not path.is_file():
        return False
    path.unlink()
    return True
