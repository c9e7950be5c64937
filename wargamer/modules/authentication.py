"""wargamer.modules.authentication

Access token lifecycle: renew (``auth/prolongate``) and destroy (``auth/logout``).

Thin pass-through. The client's token is updated only after the remote agrees.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wargamer.core.exceptions import AccessTokenMissing
from wargamer.core.types import APIResponse, Product

if TYPE_CHECKING:
    from wargamer.clients.base import BaseClient


def auth_product(client: BaseClient) -> str:
    """Token endpoints live on the console API for console clients, on WoT otherwise."""

    return Product.WOTX if client.product == Product.WOTX else Product.WOT


class Authentication:
    name = "authentication"

    def __init__(self, client: BaseClient) -> None:
        self.client = client

    async def renew_access_token(self) -> APIResponse:
        if not self.client.access_token:
            raise AccessTokenMissing("Failed to renew access token: client's access token is not set.")

        response = await self.client.post("auth/prolongate", {}, product=auth_product(self.client))
        data = response.data if isinstance(response.data, dict) else {}
        self.client.access_token = data.get("access_token", self.client.access_token)
        return response

    async def destroy_access_token(self) -> APIResponse:
        if not self.client.access_token:
            raise AccessTokenMissing("Failed to invalidate access token: client's access token is not set.")

        response = await self.client.post("auth/logout", {}, product=auth_product(self.client))
        self.client.access_token = None
        return response
