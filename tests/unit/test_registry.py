from __future__ import annotations

import pytest

from wargamer.clients import registry
from wargamer.clients.base import BaseClient
from wargamer.clients.registry import create_client, get_client, list_clients, register
from wargamer.clients.wgn import Wargaming
from wargamer.clients.wot import WorldOfTanks
from wargamer.clients.wows import WorldOfWarships
from wargamer.core.cache import CacheManager
from wargamer.core.exceptions import UnknownRealmOrProduct
from wargamer.modules.encyclopedia import WarshipsEncyclopedia


def test_every_product_has_a_client() -> None:
    assert list_clients() == ["wgn", "wot", "wotb", "wotx", "wowp", "wows"]


def test_get_client_is_case_insensitive() -> None:
    assert get_client("WOT") is WorldOfTanks
    assert WorldOfTanks.product == "wot"


def test_unknown_product_raises() -> None:
    with pytest.raises(UnknownRealmOrProduct):
        get_client("wotz")


def test_create_client_passes_options() -> None:
    client = create_client("wows", application_id="demo", realm="asia", caches=CacheManager())

    assert isinstance(client, WorldOfWarships)
    assert isinstance(client.encyclopedia, WarshipsEncyclopedia)
    assert client.base_uri == "https://api.worldofwarships.asia/wows"


def test_modules_attached_per_product() -> None:
    wgn = Wargaming("demo", "eu", caches=CacheManager())
    assert hasattr(wgn, "accounts")
    assert not hasattr(wgn, "tankopedia")
    assert not hasattr(wgn, "encyclopedia")

    wot = WorldOfTanks("demo", "eu", caches=CacheManager())
    assert wot.tankopedia.cache_prefix == "wot:eu:tankopedia"


def test_duplicate_registration_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry, "_REGISTRY", dict(registry._REGISTRY))

    with pytest.raises(ValueError):

        @register("wot")
        class _Impostor(BaseClient):
            pass


def test_register_sets_product(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry, "_REGISTRY", dict(registry._REGISTRY))

    @register("test")
    class _Dummy(BaseClient):
        pass

    assert _Dummy.product == "test"
    assert get_client("test") is _Dummy
