"""Top-level ``check`` method -- echo basic request details."""

from __future__ import annotations

from typing import TYPE_CHECKING

from restcli.models import MethodSpec
from restcli.resource import Method

if TYPE_CHECKING:
    from restcli.client.api_client import ApiClient
    from restcli.client.response import ApiResponse


class CheckMethod(Method):
    """``GET check``: answers with the caller's ``ip``, ``port`` and ``userAgent``.

    Registered directly on the client, so it is called as
    ``await client.check()`` or ``await client.check.send()``.
    """

    name = "check"
    SPEC = MethodSpec(
        method="GET",
        path="check",
        auth_required=False,
        description="Basic request details.",
    )

    def __init__(self, owner: ApiClient) -> None:
        super().__init__(None, owner)

    async def send(self) -> ApiResponse:
        return await self.invoke()
