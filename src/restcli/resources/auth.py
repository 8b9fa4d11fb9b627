"""``auth`` namespace -- inspect how a request was authenticated."""

from __future__ import annotations

from typing import TYPE_CHECKING

from restcli.models import MethodSpec
from restcli.resource import Namespace

if TYPE_CHECKING:
    from restcli.client.response import ApiResponse


class AuthNamespace(Namespace):
    name = "auth"
    METHODS = {
        "check": MethodSpec(
            method="GET", path="check", description="Check request authentication."
        ),
    }

    async def check(self) -> ApiResponse:
        """Return ``authenticated``, ``via`` (``token``/``session``), ``token``, ``session``.

        A rejected token comes back as a normal response with status 401.
        """
        return await self.require_method("check").invoke()
