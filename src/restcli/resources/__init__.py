"""Concrete API resources installed on every :class:`~restcli.client.ApiClient`.

The registry is plain data: :data:`DEFAULT_RESOURCES` lists the resource
classes in registration order, and :func:`load_resources` instantiates them
against a client. Callers wanting a different API surface pass their own
sequence to ``ApiClient(resources=...)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable

from restcli.resource import Resource
from restcli.resources.account import AccountNamespace
from restcli.resources.auth import AuthNamespace
from restcli.resources.check import CheckMethod

if TYPE_CHECKING:
    from restcli.client.api_client import ApiClient

ResourceFactory = Callable[["ApiClient"], Resource]

DEFAULT_RESOURCES: tuple[ResourceFactory, ...] = (
    AccountNamespace,
    AuthNamespace,
    CheckMethod,
)


def load_resources(client: ApiClient, factories: Iterable[ResourceFactory]) -> list[Resource]:
    """Instantiate each factory against *client*, preserving order."""
    return [factory(client) for factory in factories]


__all__ = [
    "AccountNamespace",
    "AuthNamespace",
    "CheckMethod",
    "DEFAULT_RESOURCES",
    "ResourceFactory",
    "load_resources",
]
