"""wargamer.modules.encyclopedia

Ship and plane encyclopedias.

Warplanes split the catalog: names come from ``encyclopedia/planes``, details
from ``encyclopedia/planeinfo``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from wargamer.modules.base import ClientModule
from wargamer.search.resolver import EntityResolver

if TYPE_CHECKING:
    from wargamer.clients.base import BaseClient


class WarshipsEncyclopedia(ClientModule):
    def __init__(self, client: BaseClient) -> None:
        super().__init__(client, "encyclopedia")

    def ships(self) -> EntityResolver:
        return self.resolver(
            search_fields=("name",),
            identifier_key="ship_id",
            index_endpoint="encyclopedia/ships",
            data_endpoint="encyclopedia/ships",
        )

    async def find_ship(self, identifier: int | str) -> dict[str, Any] | None:
        return await self.ships().resolve(identifier)

    async def localize(self, translation_type: str, slug: str) -> Any | None:
        return await self.localizer().localize(translation_type, slug)

    async def localize_ship_type(self, slug: str) -> str | None:
        return await self.localize("ship_types", slug)

    async def localize_language(self, slug: str) -> str | None:
        return await self.localize("languages", slug)

    async def localize_ship_modification(self, slug: str) -> str | None:
        return await self.localize("ship_modifications", slug)

    async def localize_ship_module(self, slug: str) -> str | None:
        return await self.localize("ship_modules", slug)

    async def localize_ship_nation(self, slug: str) -> str | None:
        return await self.localize("ship_nations", slug)


class WarplanesEncyclopedia(ClientModule):
    def __init__(self, client: BaseClient) -> None:
        super().__init__(client, "encyclopedia")

    def planes(self) -> EntityResolver:
        return self.resolver(
            search_fields=("name_i18n",),
            identifier_key="plane_id",
            index_endpoint="encyclopedia/planes",
            data_endpoint="encyclopedia/planeinfo",
        )

    async def find_plane(self, identifier: int | str) -> dict[str, Any] | None:
        return await self.planes().resolve(identifier)
