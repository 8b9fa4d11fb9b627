"""Asynchronous API client -- binds resources and dispatches requests.

:class:`ApiClient` owns the base URL and the bearer token, builds request
URLs from method path templates, attaches the ``Authorization`` and
``User-Agent`` headers, and wraps every answer in an
:class:`~restcli.client.response.ApiResponse`.

The client performs no retries, no rate limiting, and no status-code
interpretation: a 401 or 500 with a JSON body is returned like a 200.
Only two failures are raised:

* :class:`~restcli.exceptions.ConnectionError_` -- the transport failed
  (DNS, refused connection, timeout).
* :class:`~restcli.exceptions.ResponseDecodeError` -- a body came back but
  is not valid JSON.

Registered resources are exposed both through :meth:`ApiClient.resource`
and as attributes::

    async with ApiClient("https://api.example.com", token) as client:
        resp = await client.auth.check()
        if resp.status == 401:
            ...

Concurrent calls on one client are safe: base URL, token, and the resource
table do not change once the constructor returns. Cancelling the awaiting
task cancels the underlying :mod:`httpx` request.
"""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

import httpx

from restcli import __version__
from restcli.client.response import ApiResponse
from restcli.exceptions import (
    ConnectionError_,
    RegistrationError,
    ResourceNotFoundError,
    ResponseDecodeError,
)
from restcli.output import debug, warning
from restcli.resource import Method, Resource, apply_path_params, query_items
from restcli.resources import DEFAULT_RESOURCES, ResourceFactory, load_resources

DEFAULT_PRODUCT = "restcli"
TOKEN_PREFIXES: tuple[str, ...] = ("token_",)

_BODY_EXCERPT_CHARS = 200


def is_valid_token_shape(token: str, prefixes: Iterable[str] = TOKEN_PREFIXES) -> bool:
    """Return ``True`` if *token* starts with one of the recognised *prefixes*."""
    return bool(token) and any(token.startswith(prefix) for prefix in prefixes)


class ApiClient:
    """Authenticated client for a REST-style API.

    Args:
        base_url: Absolute API URL; request paths are appended after a ``/``.
        token: Bearer credential. Never shown by :func:`repr`.
        resources: Resource classes (or any ``factory(client)`` callables)
            to instantiate and register. Defaults to
            :data:`~restcli.resources.DEFAULT_RESOURCES`; pass ``()`` for a
            bare client.
        product: Product token of the ``User-Agent`` header.
        version: Version part of the ``User-Agent`` header.
        timeout: Timeout in seconds handed to :mod:`httpx`.
        verify_ssl: Verify TLS certificates.
        token_prefixes: Recognised token prefixes. A token matching none of
            them only triggers a warning.
        transport: Optional :mod:`httpx` transport (tests use
            :class:`httpx.MockTransport`).

    Example::

        async with ApiClient("https://api.example.com", "token_abc") as client:
            resp = await client.account.identity()
            print(resp.email)
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        resources: Optional[Sequence[ResourceFactory]] = None,
        product: str = DEFAULT_PRODUCT,
        version: str = __version__,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        token_prefixes: Iterable[str] = TOKEN_PREFIXES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._token = token
        self._user_agent = f"{product}/{version}"
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        self._resources: dict[str, Resource] = {}

        prefixes = tuple(token_prefixes)
        if not is_valid_token_shape(token, prefixes):
            warning(
                "API token does not start with a recognised prefix "
                f"({', '.join(prefixes)}); requests may be rejected."
            )

        factories = DEFAULT_RESOURCES if resources is None else resources
        self.register_resources(load_resources(self, factories))

    # ------------------------------------------------------------------ #
    # Read-only state
    # ------------------------------------------------------------------ #

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @property
    def resources(self) -> Mapping[str, Resource]:
        """Read-only view of the registered namespaces and methods."""
        return MappingProxyType(self._resources)

    def __repr__(self) -> str:
        return f"ApiClient(base_url={self._base_url!r}, resources={list(self._resources)})"

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> ApiClient:
        self._http = self._new_http_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _new_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            verify=self._verify_ssl,
            transport=self._transport,
        )

    # ------------------------------------------------------------------ #
    # Resource registry
    # ------------------------------------------------------------------ #

    def register_resources(
        self, resources: Iterable[Resource], *, replace: bool = False
    ) -> ApiClient:
        """Attach *resources* under their ``name``.

        Args:
            resources: Namespace or method instances bound to this client.
            replace: When ``True`` a later resource silently replaces an
                earlier one with the same name. When ``False`` (the
                default) a collision raises.

        Raises:
            RegistrationError: On a duplicate or empty name.
        """
        for resource in resources:
            name = resource.name
            if not name:
                raise RegistrationError(f"Resource {resource!r} has no name")
            if hasattr(type(self), name):
                raise RegistrationError(f"Resource name '{name}' shadows a client attribute")
            if name in self._resources and not replace:
                raise RegistrationError(f"A resource named '{name}' is already registered")
            self._resources[name] = resource
        return self

    def resource(self, name: str) -> Resource:
        """Return the namespace or method registered under *name*.

        Raises:
            ResourceNotFoundError: If nothing is registered under *name*.
        """
        try:
            return self._resources[name]
        except KeyError:
            raise ResourceNotFoundError(f"No resource named '{name}' is registered") from None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        registered = self.__dict__.get("_resources", {})
        if name in registered:
            return registered[name]
        raise AttributeError(f"{type(self).__name__} has no resource {name!r}")

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def build_url(self, path: str, query: Optional[list[tuple[str, str]]] = None) -> str:
        """Join *path* onto the base URL and append an encoded *query*."""
        url = f"{self._base_url.rstrip('/')}/{path.lstrip('/')}"
        if query:
            url = f"{url}?{httpx.QueryParams(query)}"
        return url

    def _headers(self, content_type: Optional[str] = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "User-Agent": self._user_agent,
        }
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    async def dispatch(
        self,
        method: Method,
        path_params: Mapping[str, Any],
        body_params: Mapping[str, Any],
    ) -> ApiResponse:
        """Execute one request for *method* and wrap the answer.

        GET and HEAD send leftover parameters as a query string and no body;
        every other verb encodes them with the method's encoder and sends
        them as the body.

        Raises:
            InvalidUsageError: If a query parameter value cannot be encoded.
            ConnectionError_: On a transport failure.
            ResponseDecodeError: If the body is not valid JSON.
        """
        path = apply_path_params(method.path, path_params)
        content: Optional[str] = None
        if method.has_body:
            url = self.build_url(path)
            content = method.encode(dict(body_params))
            headers = self._headers(method.spec.content_type)
        else:
            url = self.build_url(path, query_items(body_params))
            headers = self._headers()

        verb = method.method.value
        debug(f"{verb} {url}")
        response = await self._send(verb, url, headers, content)
        return ApiResponse(response, self._decode(response))

    async def _send(
        self,
        verb: str,
        url: str,
        headers: dict[str, str],
        content: Optional[str],
    ) -> httpx.Response:
        try:
            if self._http is not None:
                return await self._http.request(verb, url, headers=headers, content=content)
            async with self._new_http_client() as http:
                return await http.request(verb, url, headers=headers, content=content)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"{verb} {url} failed: {exc}") from exc

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode a JSON body; an empty body decodes to ``{}``."""
        if not response.content:
            return {}
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            excerpt = response.text[:_BODY_EXCERPT_CHARS]
            raise ResponseDecodeError(
                f"HTTP {response.status_code} response body is not valid JSON: {exc}",
                status_code=response.status_code,
                body_excerpt=excerpt,
            ) from exc
