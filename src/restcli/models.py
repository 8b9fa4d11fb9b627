"""Canonical Pydantic models shared across restcli modules.

The models fall into two groups:

**Declaration models** -- describe API operations before they are bound to a
client: :class:`HTTPMethod` and :class:`MethodSpec`.

**Configuration models** -- serialised as JSON in the user's config directory:
:class:`OutputConfig` and :class:`GlobalConfig`.

All models use Pydantic v2. Declarations are frozen so that a spec shared by
several namespaces cannot drift after registration.
"""

from __future__ import annotations

import enum
import json
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Declarations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods a :class:`MethodSpec` may declare.

    Values are the wire form sent on the request line.
    """

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @property
    def has_body(self) -> bool:
        """Whether leftover parameters travel in the body rather than the query string."""
        return self not in _BODYLESS_METHODS


_BODYLESS_METHODS = frozenset({HTTPMethod.GET, HTTPMethod.HEAD})


def encode_json(data: dict[str, Any]) -> str:
    """Default body encoder: compact JSON."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


class MethodSpec(BaseModel):
    """Declarative description of one API operation.

    A spec is pure data: it is turned into a live
    :class:`~restcli.resource.Method` by
    :meth:`~restcli.resource.Namespace.register_method` or by subclassing
    :class:`~restcli.resource.Method` directly.

    Example::

        MethodSpec(method="GET", path="account/:id")
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: HTTPMethod = Field(default=HTTPMethod.GET, description="HTTP verb")
    path: str = Field(
        default="",
        description="Path template appended to the base URL, e.g. 'check' or ':id'",
    )
    encode: Callable[[dict[str, Any]], str] = Field(
        default=encode_json, description="Serialises body parameters"
    )
    content_type: str = Field(
        default="application/json", description="Content-Type sent with a body"
    )
    auth_required: bool = Field(
        default=True, description="Whether the CLI insists on a stored token"
    )
    description: str = Field(default="", description="Help text for the CLI command")

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )
    color: bool = Field(default=True, description="Colourise headers and JSON bodies")


class GlobalConfig(BaseModel):
    """User-level configuration persisted as ``config.json``.

    Loaded by :func:`~restcli.config.load_global_config` and merged with
    project config, environment variables, and CLI flags by
    :func:`~restcli.config.resolve_config`.
    """

    base_url: str = Field(
        default="https://api.example.com", description="API base URL"
    )
    user_agent: str = Field(
        default="restcli", description="Product token used in the User-Agent header"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    token_prefixes: list[str] = Field(
        default_factory=lambda: ["token_"],
        description="Recognised bearer token prefixes (advisory check only)",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
