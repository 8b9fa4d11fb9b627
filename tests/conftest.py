"""Shared test fixtures for restcli.

Provides a mock-transport client factory, isolated config directories, and
output state management. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from restcli.client import ApiClient
from restcli.output import OutputFormat, OutputManager, reset_output, set_output

BASE_URL = "https://api.example.com"
TOKEN = "token_test123"

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams, so a stale manager would
    write to closed files.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Network fixtures
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def _json_handler(data: Any, status_code: int, headers: dict[str, str] | None) -> Handler:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=data if data is not None else {}, headers=headers)

    return _handler


@pytest.fixture
def make_client() -> Callable[..., tuple[ApiClient, RecordingTransport]]:
    """Factory building an ApiClient whose network is a RecordingTransport.

    Either pass a full *handler*, or let the fixture answer every request
    with *json*, *status_code*, and *headers*::

        client, transport = make_client(json={"ok": True})
        client, transport = make_client(lambda request: httpx.Response(204))
    """

    def _make(
        handler: Handler | None = None,
        *,
        json: Any = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> tuple[ApiClient, RecordingTransport]:
        transport = RecordingTransport(handler or _json_handler(json, status_code, headers))
        kwargs.setdefault("token", TOKEN)
        client = ApiClient(BASE_URL, kwargs.pop("token"), transport=transport, **kwargs)
        return client, transport

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Isolate configuration and the token file to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path,
    forces the XDG layout, clears RESTCLI_* variables, and changes the
    working directory to tmp_path.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("restcli.config._is_xdg_platform", lambda: True)
    for var in ["RESTCLI_BASE_URL", "RESTCLI_TOKEN", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
