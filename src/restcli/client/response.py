"""Immutable response wrapper returned by every API call.

:class:`ApiResponse` combines the transport metadata of an
:class:`httpx.Response` (status, reason phrase, headers) with the decoded
JSON payload. Top-level payload keys are readable as attributes::

    resp = await client.auth.check()
    resp.status            # 200
    resp.authenticated     # True  (payload field)
    resp["via"]            # "token"
    resp.response_id       # value of X-Response-Id, or None

Payload keys that collide with a wrapper property (``status``, ``headers``,
``raw``, ...) are still reachable through item access.

The wrapper is frozen at construction: attribute assignment and deletion
raise :class:`AttributeError`, objects inside the payload become read-only
mappings and arrays become tuples. :meth:`ApiResponse.to_dict` and
:meth:`ApiResponse.json` return mutable copies.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

import httpx

RESPONSE_ID_HEADER = "X-Response-Id"


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


_EMPTY: Mapping[str, Any] = MappingProxyType({})


class ApiResponse:
    """Read-only view of one HTTP response and its decoded JSON body.

    Args:
        raw: The transport response.
        body: The decoded JSON payload (any JSON value).
    """

    __slots__ = ("_raw", "_payload", "_fields")

    def __init__(self, raw: httpx.Response, body: Any) -> None:
        frozen = _freeze(body)
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_payload", frozen)
        object.__setattr__(self, "_fields", frozen if isinstance(frozen, Mapping) else _EMPTY)

    # ------------------------------------------------------------------ #
    # Transport metadata
    # ------------------------------------------------------------------ #

    @property
    def raw(self) -> httpx.Response:
        """The underlying :class:`httpx.Response`."""
        return self._raw

    @property
    def status(self) -> int:
        return self._raw.status_code

    @property
    def status_text(self) -> str:
        return self._raw.reason_phrase

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Response headers as ``(name, value)`` pairs, duplicates preserved."""
        return tuple(self._raw.headers.multi_items())

    @property
    def ok(self) -> bool:
        return 200 <= self._raw.status_code < 300

    @property
    def response_id(self) -> Optional[str]:
        """Value of the ``X-Response-Id`` header, or ``None`` when absent."""
        return self._raw.headers.get(RESPONSE_ID_HEADER)

    # ------------------------------------------------------------------ #
    # Payload
    # ------------------------------------------------------------------ #

    @property
    def payload(self) -> Any:
        """The frozen decoded body, whatever its JSON type."""
        return self._payload

    def keys(self) -> list[str]:
        return list(self._fields)

    def get(self, key: str, default: Any = None) -> Any:
        return self._fields.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Mutable deep copy of the top-level payload fields."""
        return _thaw(self._fields)

    def json(self) -> Any:
        """Mutable deep copy of the payload, whatever its JSON type."""
        return _thaw(self._payload)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        fields = object.__getattribute__(self, "_fields")
        try:
            return fields[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!s} has no field {name!r}"
            ) from None

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"ApiResponse is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"ApiResponse is immutable; cannot delete {name!r}")

    def __repr__(self) -> str:
        return f"<ApiResponse {self.status} {self.status_text} fields={self.keys()}>"
