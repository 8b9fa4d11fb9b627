"""``account`` namespace -- the authenticated user's account."""

from __future__ import annotations

from typing import TYPE_CHECKING

from restcli.models import MethodSpec
from restcli.resource import Namespace

if TYPE_CHECKING:
    from restcli.client.response import ApiResponse


class AccountNamespace(Namespace):
    """Account details of the token owner.

    Fields returned by ``retrieve``: ``created``, ``id``, ``identity``.
    Fields returned by ``identity``: ``country`` (alpha-2 code from
    registration), ``email``, ``name``, ``username``.
    """

    name = "account"
    METHODS = {
        "retrieve": MethodSpec(method="GET", path="", description="Retrieve the account."),
        "identity": MethodSpec(
            method="GET", path="identity", description="Show the account identity."
        ),
    }

    async def retrieve(self) -> ApiResponse:
        return await self.require_method("retrieve").invoke()

    async def identity(self) -> ApiResponse:
        return await self.require_method("identity").invoke()
