from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx
import pytest

from tests.unit._fakes import envelope, error_envelope, json_response, make_client, request_params
from wargamer.clients.base import normalize_parameter_value, normalize_params, response_cache_key
from wargamer.clients.wot import WorldOfTanks
from wargamer.core.cache import CacheManager
from wargamer.core.config import CacheConfig, ClientConfig
from wargamer.core.exceptions import ConfigError, RemoteAPIError, TransportError, UnknownRealmOrProduct
from wargamer.security.redaction import REDACTED


def _ok(request: httpx.Request) -> httpx.Response:
    return json_response(envelope({"path": request.url.path}))


def test_normalize_parameter_value() -> None:
    assert normalize_parameter_value(True) == "1"
    assert normalize_parameter_value(False) == "0"
    assert normalize_parameter_value(["name", "tank_id"]) == "name,tank_id"
    assert normalize_parameter_value((1, 2)) == "1,2"
    assert normalize_parameter_value({"b", "a"}) == "a,b"
    assert normalize_parameter_value(datetime(2024, 5, 1, 12, tzinfo=timezone.utc)) == "2024-05-01T12:00:00+00:00"
    assert normalize_parameter_value(7) == 7


def test_normalize_params_drops_none() -> None:
    assert normalize_params({"a": None, "b": 1}) == {"b": 1}


def test_response_cache_key_ignores_application_id_and_order() -> None:
    url = "https://api.worldoftanks.eu/wot/encyclopedia/vehicles/"
    a = response_cache_key(url, {"application_id": "one", "tank_id": 1, "language": "en"})
    b = response_cache_key(url, {"language": "en", "tank_id": 1, "application_id": "two"})
    c = response_cache_key(url, {"language": "en", "tank_id": 2})
    assert a == b
    assert a != c


def test_unknown_realm_is_rejected_at_construction() -> None:
    with pytest.raises(UnknownRealmOrProduct):
        make_client(WorldOfTanks, _ok, realm="mars")


def test_missing_application_id_is_rejected() -> None:
    with pytest.raises(ConfigError):
        make_client(WorldOfTanks, _ok, application_id="")


def test_realm_is_case_insensitive() -> None:
    client, _ = make_client(WorldOfTanks, _ok, realm="NA")
    assert client.realm == "na"
    assert client.base_uri == "https://api.worldoftanks.com/wot"


@pytest.mark.anyio
async def test_get_builds_url_and_query() -> None:
    client, transport = make_client(WorldOfTanks, _ok, language="en")

    response = await client.get("/Encyclopedia/Vehicles/", {"fields": ["name", "tank_id"], "in_garage": True})

    (request,) = transport.requests
    assert request.method == "GET"
    assert str(request.url).split("?")[0] == "https://api.worldoftanks.eu/wot/encyclopedia/vehicles/"
    assert request_params(request) == {
        "application_id": "demo",
        "language": "en",
        "fields": "name,tank_id",
        "in_garage": "1",
    }
    assert response.method == "encyclopedia/vehicles"
    assert response.realm == "eu"
    assert response.data == {"path": "/wot/encyclopedia/vehicles/"}
    assert response.cached is False


@pytest.mark.anyio
async def test_caller_params_override_credentials() -> None:
    client, transport = make_client(WorldOfTanks, _ok, language="en")

    await client.get("account/list", {"language": "ru", "search": "tanker"})

    assert request_params(transport.requests[0])["language"] == "ru"


@pytest.mark.anyio
async def test_post_sends_form_body() -> None:
    client, transport = make_client(WorldOfTanks, _ok, access_token="tok")

    await client.post("auth/prolongate", {"expires_at": 14})

    (request,) = transport.requests
    assert request.method == "POST"
    assert request.url.query == b""
    assert request_params(request) == {"application_id": "demo", "access_token": "tok", "expires_at": "14"}


@pytest.mark.anyio
async def test_realm_and_product_overrides() -> None:
    client, transport = make_client(WorldOfTanks, _ok)

    await client.get("account/list", {"search": "x"}, realm="na", product="wgn")

    assert str(transport.requests[0].url).startswith("https://api.worldoftanks.com/wgn/account/list/")


@pytest.mark.anyio
async def test_error_envelope_raises_remote_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return json_response(error_envelope(402, "SEARCH_NOT_SPECIFIED", "search", None))

    client, _ = make_client(WorldOfTanks, handler)

    with pytest.raises(RemoteAPIError) as e:
        await client.get("account/list")

    err = e.value
    assert err.code == 402
    assert err.remote_message == "SEARCH_NOT_SPECIFIED"
    assert err.field == "search"
    assert err.method == "account/list"
    assert err.realm == "eu"
    assert err.url == "https://api.worldoftanks.eu/wot/account/list/"
    assert str(err) == "402: SEARCH_NOT_SPECIFIED. Error field: search => None."


@pytest.mark.anyio
async def test_error_envelope_on_http_error_status_is_still_remote_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return json_response(error_envelope(504, "SOURCE_NOT_AVAILABLE"), status_code=504)

    client, _ = make_client(WorldOfTanks, handler)

    with pytest.raises(RemoteAPIError) as e:
        await client.get("encyclopedia/vehicles")
    assert e.value.status_code == 504


@pytest.mark.anyio
async def test_http_error_without_envelope_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return json_response({"detail": "bad gateway"}, status_code=502)

    client, _ = make_client(WorldOfTanks, handler)

    with pytest.raises(TransportError) as e:
        await client.get("encyclopedia/vehicles")
    assert e.value.status_code == 502


@pytest.mark.anyio
async def test_undecodable_body_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>maintenance</html>")

    client, _ = make_client(WorldOfTanks, handler)

    with pytest.raises(TransportError):
        await client.get("encyclopedia/vehicles")


@pytest.mark.anyio
async def test_network_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = make_client(WorldOfTanks, handler)

    with pytest.raises(TransportError):
        await client.get("encyclopedia/vehicles")


@pytest.mark.anyio
async def test_successful_gets_are_served_from_response_cache() -> None:
    caches = CacheManager()
    client, transport = make_client(WorldOfTanks, _ok, caches=caches)

    first = await client.get("encyclopedia/vehicles", {"tank_id": 1})
    second = await client.get("encyclopedia/vehicles", {"tank_id": 1})
    await client.get("encyclopedia/vehicles", {"tank_id": 2})

    assert len(transport.requests) == 2
    assert first.cached is False
    assert second.cached is True
    assert second.data == first.data
    assert caches.get("wot:eu:responses").size == 2


@pytest.mark.anyio
async def test_posts_and_errors_are_never_cached() -> None:
    responses = iter(
        [
            json_response(error_envelope(407, "REQUEST_LIMIT_EXCEEDED")),
            json_response(envelope({"ok": 1})),
            json_response(envelope({"ok": 2})),
            json_response(envelope({"ok": 3})),
        ]
    )
    client, transport = make_client(WorldOfTanks, lambda request: next(responses), access_token="tok")

    with pytest.raises(RemoteAPIError):
        await client.get("encyclopedia/info")
    assert (await client.get("encyclopedia/info")).data == {"ok": 1}

    await client.post("auth/prolongate")
    await client.post("auth/prolongate")
    assert len(transport.requests) == 4


@pytest.mark.anyio
async def test_response_cache_can_be_disabled() -> None:
    config = ClientConfig(application_id="demo", cache=CacheConfig(cache_responses=False))
    client, transport = make_client(WorldOfTanks, _ok, config=config)

    await client.get("encyclopedia/info")
    await client.get("encyclopedia/info")

    assert len(transport.requests) == 2


@pytest.mark.anyio
async def test_request_log_redacts_credentials(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="wargamer")
    client, _ = make_client(WorldOfTanks, _ok, access_token="secret-token")

    await client.get("account/info", {"account_id": 1})

    (record,) = [r for r in caplog.records if r.getMessage() == "api_request"]
    assert record.params["application_id"] == REDACTED
    assert record.params["access_token"] == REDACTED
    assert record.params["account_id"] == 1
    assert "secret-token" not in caplog.text


@pytest.mark.anyio
async def test_unsupported_http_method() -> None:
    client, _ = make_client(WorldOfTanks, _ok)
    with pytest.raises(ValueError):
        await client.request("encyclopedia/info", http_method="DELETE")


@pytest.mark.anyio
async def test_client_context_manager_closes_owned_requester() -> None:
    async with WorldOfTanks("demo", "eu") as client:
        assert client.ctx.requester is not None
    assert client.ctx.requester._client.is_closed


@pytest.mark.anyio
async def test_use_cache_false_always_hits_the_network() -> None:
    caches = CacheManager()
    client, transport = make_client(WorldOfTanks, _ok, caches=caches)

    await client.get("encyclopedia/vehicles", {"fields": "name"}, use_cache=False)
    await client.get("encyclopedia/vehicles", {"fields": "name"}, use_cache=False)

    assert len(transport.requests) == 2
    assert caches.get("wot:eu:responses") is None


@pytest.mark.anyio
async def test_mutating_a_response_does_not_touch_the_cache() -> None:
    client, transport = make_client(WorldOfTanks, _ok, caches=CacheManager())

    first = await client.get("encyclopedia/vehicles", {"tank_id": 1})
    first.data["path"] = "changed"
    second = await client.get("encyclopedia/vehicles", {"tank_id": 1})
    second.data["path"] = "changed again"
    third = await client.get("encyclopedia/vehicles", {"tank_id": 1})

    assert third.cached is True
    assert third.data == {"path": "/wot/encyclopedia/vehicles/"}
    assert len(transport.requests) == 1
