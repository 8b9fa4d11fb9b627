"""HTTP client module for restcli.

Classes:
    :class:`ApiClient` -- binds resources and dispatches authenticated
    requests over :class:`httpx.AsyncClient`.
    :class:`ApiResponse` -- immutable wrapper around one response.

Example::

    from restcli.client import ApiClient

    async with ApiClient("https://api.example.com", token) as client:
        resp = await client.auth.check()
"""

from restcli.client.api_client import ApiClient, is_valid_token_shape
from restcli.client.response import ApiResponse

__all__ = ["ApiClient", "ApiResponse", "is_valid_token_shape"]
