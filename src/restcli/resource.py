"""Declarative resources: path templates, method descriptors, and namespaces.

A *method* is one API operation (verb + path template + body encoder) bound
to the :class:`~restcli.client.ApiClient` that executes it. A *namespace*
groups methods under a shared path prefix. Both are plain objects created
once when a client is constructed; neither performs I/O on its own -- every
call goes through :meth:`ApiClient.dispatch`.

**Path templates** use ``:name`` placeholders, each spanning one path
segment::

    account/:id/keys/:key_id

Placeholders whose name is present in the call input are substituted;
unknown placeholders stay in the path literally.

Example::

    class Users(Namespace):
        name = "users"
        METHODS = {
            "get": MethodSpec(path=":id"),
            "rename": MethodSpec(method="PATCH", path=":id"),
        }

    resp = await client.users.require_method("rename").invoke(id=7, name="x")
    # PATCH <base>/users/7 with body {"name":"x"}
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Mapping, Optional, Union
from urllib.parse import quote

from restcli.exceptions import InvalidUsageError, MethodNotFoundError
from restcli.models import HTTPMethod, MethodSpec

if TYPE_CHECKING:
    from restcli.client.api_client import ApiClient
    from restcli.client.response import ApiResponse

PLACEHOLDER_MARKER = ":"

_PLACEHOLDER_RE = re.compile(re.escape(PLACEHOLDER_MARKER) + r"([^/]+)")

_SCALAR_TYPES = (str, int, float, bool)


# ---------------------------------------------------------------------------
# Path templates
# ---------------------------------------------------------------------------


def path_placeholders(template: str) -> list[str]:
    """Return the placeholder names found in *template*, in order of appearance.

    Example::

        >>> path_placeholders("account/:id/keys/:key_id")
        ['id', 'key_id']
    """
    return _PLACEHOLDER_RE.findall(template)


def apply_path_params(template: str, params: Mapping[str, Any]) -> str:
    """Substitute placeholders in *template* with values from *params*.

    Each value is stringified and percent-encoded as a single path segment.
    Placeholders without a matching key are left untouched, so
    ``apply_path_params("account/:id", {})`` returns ``"account/:id"``.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in params:
            return quote(str(params[name]), safe="")
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, template)


def split_params(
    template: str, data: Mapping[str, Any]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split *data* into ``(path_params, remaining_params)`` for *template*.

    Keys naming a placeholder of the template are path parameters; every
    other key is left for the body or the query string.
    """
    names = set(path_placeholders(template))
    path_params = {k: v for k, v in data.items() if k in names}
    remaining = {k: v for k, v in data.items() if k not in names}
    return path_params, remaining


def query_items(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten *params* into query-string pairs.

    Scalars become one pair, booleans are spelled ``true``/``false``, lists
    and tuples of scalars repeat the key, and ``None`` values are dropped.

    Raises:
        InvalidUsageError: If a value is a mapping or a list holding
            anything other than scalars.
    """
    items: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for element in value:
                if not isinstance(element, _SCALAR_TYPES):
                    raise InvalidUsageError(
                        f"Query parameter '{key}' contains a nested value; "
                        "only scalars and lists of scalars can be sent in a query string"
                    )
                items.append((key, _scalar_to_str(element)))
        elif isinstance(value, _SCALAR_TYPES):
            items.append((key, _scalar_to_str(value)))
        else:
            raise InvalidUsageError(
                f"Query parameter '{key}' has unsupported type {type(value).__name__}; "
                "send it in a request body instead"
            )
    return items


def _scalar_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ---------------------------------------------------------------------------
# Method descriptor
# ---------------------------------------------------------------------------


class Method:
    """One API operation bound to an owning client.

    Built from a :class:`~restcli.models.MethodSpec`. The effective
    :attr:`path` is fixed at construction; namespaces pass the prefixed path
    explicitly.

    A ``Method`` subclass can also be registered on a client directly as a
    top-level resource by setting :attr:`name` and :attr:`SPEC`; see
    :class:`~restcli.resources.check.CheckMethod`.

    Args:
        spec: Declaration of the operation. Defaults to the class-level
            :attr:`SPEC`.
        owner: The client that executes requests for this method.
        name: Logical name. Defaults to the class-level :attr:`name`.
        path: Effective path template. Defaults to ``spec.path``.
    """

    name: ClassVar[str] = ""
    SPEC: ClassVar[MethodSpec] = MethodSpec()

    def __init__(
        self,
        spec: Optional[MethodSpec],
        owner: ApiClient,
        name: Optional[str] = None,
        path: Optional[str] = None,
    ) -> None:
        self._spec = spec if spec is not None else type(self).SPEC
        self._owner = owner
        self._path = path if path is not None else self._spec.path
        if name is not None:
            self.name = name  # type: ignore[misc]

    @property
    def spec(self) -> MethodSpec:
        return self._spec

    @property
    def method(self) -> HTTPMethod:
        return self._spec.method

    @property
    def path(self) -> str:
        """Effective path template, including any namespace prefix."""
        return self._path

    @property
    def owner(self) -> ApiClient:
        return self._owner

    @property
    def has_body(self) -> bool:
        return self._spec.method.has_body

    def encode(self, data: dict[str, Any]) -> str:
        return self._spec.encode(data)

    def split(self, data: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
        """Split call input into path parameters and body/query parameters."""
        return split_params(self._path, data)

    async def invoke(
        self, data: Optional[Mapping[str, Any]] = None, /, **kwargs: Any
    ) -> ApiResponse:
        """Send a request for this method and return the wrapped response.

        Input may be given as a mapping, as keyword arguments, or both
        (keywords win on conflict). The mapping is positional only, so a
        field named ``data`` can be passed as a keyword.
        """
        merged: dict[str, Any] = dict(data or {})
        merged.update(kwargs)
        path_params, body_params = self.split(merged)
        return await self._owner.dispatch(self, path_params, body_params)

    __call__ = invoke

    def __repr__(self) -> str:
        return f"<Method {self.name or '?'} {self.method.value} {self._path!r}>"


# ---------------------------------------------------------------------------
# Namespace
# ---------------------------------------------------------------------------


class Namespace:
    """A named group of methods sharing a path prefix.

    Subclasses set :attr:`name` and declare their operations in
    :attr:`METHODS`; each entry is registered when the namespace is bound to
    a client. Typed accessors are ordinary async methods::

        async def check(self) -> ApiResponse:
            return await self.require_method("check").invoke()

    Args:
        owner: The client that executes requests.
        path: Path prefix. Defaults to :attr:`name`.
    """

    name: ClassVar[str] = ""
    METHODS: ClassVar[Mapping[str, MethodSpec]] = {}

    def __init__(self, owner: ApiClient, path: Optional[str] = None) -> None:
        self._owner = owner
        self._path = path if path is not None else self.name
        self._methods: dict[str, Method] = {}
        for method_name, spec in self.METHODS.items():
            self.register_method(method_name, spec)

    @property
    def path(self) -> str:
        return self._path

    @property
    def owner(self) -> ApiClient:
        return self._owner

    @property
    def methods(self) -> Mapping[str, Method]:
        """Read-only view of the registered methods, in registration order."""
        return MappingProxyType(self._methods)

    def register_method(self, name: str, spec: MethodSpec) -> Method:
        """Create a :class:`Method` for *spec* under this namespace's prefix.

        The effective path is ``<prefix>/<spec.path>`` and is not re-derived
        later. Registering an existing name replaces the earlier method.
        """
        method = Method(spec, self._owner, name=name, path=f"{self._path}/{spec.path}")
        self._methods[name] = method
        return method

    def get_method(self, name: str) -> Optional[Method]:
        """Return the method registered under *name*, or ``None``."""
        return self._methods.get(name)

    def require_method(self, name: str) -> Method:
        """Return the method registered under *name*.

        Raises:
            MethodNotFoundError: If nothing was registered under *name*.
        """
        method = self._methods.get(name)
        if method is None:
            raise MethodNotFoundError(f"Namespace '{self.name}' has no method '{name}'")
        return method

    def __repr__(self) -> str:
        return f"<Namespace {self.name} methods={list(self._methods)}>"


Resource = Union[Namespace, Method]
