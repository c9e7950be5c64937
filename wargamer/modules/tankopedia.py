"""wargamer.modules.tankopedia

Vehicle encyclopedia for World of Tanks, Blitz and Console.

``find_vehicle`` takes a ``tank_id`` or a name; names are fuzzy-matched against
``name`` and ``short_name``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from wargamer.modules.base import ClientModule
from wargamer.search.catalog import extract_top_modules
from wargamer.search.resolver import EntityResolver

if TYPE_CHECKING:
    from wargamer.clients.base import BaseClient


class Tankopedia(ClientModule):
    search_fields = ("name", "short_name")
    identifier_key = "tank_id"
    vehicles_endpoint = "encyclopedia/vehicles"

    def __init__(self, client: BaseClient) -> None:
        super().__init__(client, "tankopedia")

    def vehicles(self) -> EntityResolver:
        return self.resolver(
            search_fields=self.search_fields,
            identifier_key=self.identifier_key,
            index_endpoint=self.vehicles_endpoint,
            data_endpoint=self.vehicles_endpoint,
        )

    async def find_vehicle(self, identifier: int | str) -> dict[str, Any] | None:
        return await self.vehicles().resolve(identifier)

    async def find_top_modules(self, identifier: int | str) -> dict[str, Mapping[str, Any]] | None:
        """Most expensive (by research XP) module of each type for a vehicle."""

        vehicle = await self.find_vehicle(identifier)
        if vehicle is None:
            return None
        tree = vehicle.get("modules_tree")
        if not isinstance(tree, Mapping):
            return {}
        return extract_top_modules(tree, cost_field="price_xp")

    async def localize(self, translation_type: str, slug: str) -> Any | None:
        return await self.localizer().localize(translation_type, slug)

    async def localize_vehicle_type(self, slug: str) -> str | None:
        return await self.localize("vehicle_types", slug)

    async def localize_vehicle_nation(self, slug: str) -> str | None:
        return await self.localize("vehicle_nations", slug)

    async def localize_language(self, slug: str) -> str | None:
        return await self.localize("languages", slug)

    async def localize_crew_role(self, slug: str) -> str | None:
        return await self.localize("vehicle_crew_roles", slug)

    async def localize_achievement_section(self, slug: str) -> str | None:
        # sections are objects; the display value is their name
        section = await self.localize("achievement_sections", slug)
        if isinstance(section, Mapping):
            return section.get("name")
        return section
