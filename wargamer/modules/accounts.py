"""wargamer.modules.accounts

Player lookups on ``account/list``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from wargamer.core.exceptions import InvalidSearchType
from wargamer.modules.base import ClientModule

if TYPE_CHECKING:
    from wargamer.clients.base import BaseClient

SEARCH_TYPES = ("exact", "startswith")


class Accounts(ClientModule):
    def __init__(self, client: BaseClient) -> None:
        super().__init__(client, "accounts")

    async def find_player_id(self, name: str, search_type: str = "exact") -> int | list[dict[str, Any]] | None:
        """Search players by nickname.

        ``"exact"`` returns the first matching ``account_id`` (or ``None``);
        ``"startswith"`` returns the endpoint's list as-is.
        """

        kind = str(search_type).lower()
        if kind not in SEARCH_TYPES:
            raise InvalidSearchType(f"Invalid search type specified for player search: {search_type!r}")

        response = await self.client.get("account/list", {"search": name, "type": kind})
        players = response.data if isinstance(response.data, list) else []

        if kind == "startswith":
            return players
        return players[0].get("account_id") if players else None
