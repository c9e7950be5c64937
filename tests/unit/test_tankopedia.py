from __future__ import annotations

from typing import Any

import httpx
import pytest

from tests.unit._fakes import envelope, json_response, make_client, request_params
from wargamer.clients.wot import WorldOfTanks
from wargamer.clients.wotb import WorldOfTanksBlitz
from wargamer.core.cache import CacheManager
from wargamer.core.config import CacheConfig, ClientConfig
from wargamer.core.exceptions import InvalidIdentifierType, InvalidTranslationType

VEHICLES: dict[str, dict[str, Any]] = {
    "1": {
        "tank_id": 1,
        "name": "T-34",
        "short_name": "T-34",
        "modules_tree": {
            "10": {"type": "vehicleGun", "name": "76 mm L-11", "price_xp": 0},
            "11": {"type": "vehicleGun", "name": "57 mm ZiS-4", "price_xp": 4100},
            "12": {"type": "vehicleEngine", "name": "V-2-34", "price_xp": 0},
        },
    },
    "2": {"tank_id": 2, "name": "Tiger I", "short_name": "Tiger", "modules_tree": {}},
}

INFO = {
    "vehicle_types": {"mediumTank": "Medium Tank"},
    "vehicle_nations": {"germany": "Germany"},
    "languages": {"en": "English"},
    "vehicle_crew_roles": {"gunner": "Gunner"},
    "achievement_sections": {"epic": {"name": "Epic Achievements", "order": 2}},
}


def _api(request: httpx.Request) -> httpx.Response:
    params = request_params(request)
    path = request.url.path
    if path.endswith("/encyclopedia/info/"):
        return json_response(envelope(INFO))
    if "tank_id" in params:
        return json_response(envelope({params["tank_id"]: VEHICLES.get(params["tank_id"])}))
    fields = params["fields"].split(",")
    return json_response(envelope({k: {f: v[f] for f in fields} for k, v in VEHICLES.items()}))


@pytest.mark.anyio
async def test_find_vehicle_by_id() -> None:
    client, transport = make_client(WorldOfTanks, _api, caches=CacheManager())

    vehicle = await client.tankopedia.find_vehicle(2)

    assert vehicle["name"] == "Tiger I"
    assert len(transport.requests) == 1


@pytest.mark.anyio
async def test_find_vehicle_by_name() -> None:
    client, transport = make_client(WorldOfTanks, _api, caches=CacheManager())

    vehicle = await client.tankopedia.find_vehicle("tiger")

    assert vehicle["tank_id"] == 2
    listing, detail = transport.requests
    assert request_params(listing)["fields"] == "name,short_name,tank_id"
    assert request_params(detail)["tank_id"] == "2"


@pytest.mark.anyio
async def test_find_vehicle_rejects_other_identifiers() -> None:
    client, transport = make_client(WorldOfTanks, _api, caches=CacheManager())
    with pytest.raises(InvalidIdentifierType):
        await client.tankopedia.find_vehicle(["tiger"])
    assert transport.requests == []


@pytest.mark.anyio
async def test_blitz_uses_its_own_index() -> None:
    caches = CacheManager()
    wot, _ = make_client(WorldOfTanks, _api, caches=caches)
    blitz, _ = make_client(WorldOfTanksBlitz, _api, caches=caches)

    await wot.tankopedia.find_vehicle("tiger")
    await blitz.tankopedia.find_vehicle("tiger")

    assert caches.has("wot:eu:tankopedia:names")
    assert caches.has("wotb:eu:tankopedia:names")


@pytest.mark.anyio
async def test_find_top_modules() -> None:
    client, _ = make_client(WorldOfTanks, _api, caches=CacheManager())

    top = await client.tankopedia.find_top_modules("t-34")

    assert {kind: m["name"] for kind, m in top.items()} == {
        "vehicleGun": "57 mm ZiS-4",
        "vehicleEngine": "V-2-34",
    }
    assert await client.tankopedia.find_top_modules(2) == {}
    assert await client.tankopedia.find_top_modules("battleship") is None


@pytest.mark.anyio
async def test_localizers() -> None:
    config = ClientConfig(application_id="demo", cache=CacheConfig(cache_responses=False))
    client, transport = make_client(WorldOfTanks, _api, caches=CacheManager(), config=config)
    tankopedia = client.tankopedia

    assert await tankopedia.localize_vehicle_type("mediumTank") == "Medium Tank"
    assert await tankopedia.localize_vehicle_nation("germany") == "Germany"
    assert await tankopedia.localize_language("en") == "English"
    assert await tankopedia.localize_crew_role("gunner") == "Gunner"
    assert await tankopedia.localize_achievement_section("epic") == "Epic Achievements"
    assert await tankopedia.localize_achievement_section("rare") is None
    assert await tankopedia.localize_vehicle_type("spg") is None
    # one fetch per translation table, the rest come from the meta cache
    assert len(transport.requests) == 5

    with pytest.raises(InvalidTranslationType):
        await tankopedia.localize("ship_types", "Destroyer")
