"""wargamer.clients.base

One client per product, all built on the same request path:
- resolve the URL for (realm, product, method)
- merge credentials under the caller's params, normalize values
- serve GETs from the response cache when possible
- send through the Requester, parse the envelope, raise typed errors

Product clients only add modules (accounts, tankopedia, encyclopedia...).
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from wargamer.core.cache import Cache, CacheManager, default_cache_manager
from wargamer.core.client import HTTPRequester, Requester
from wargamer.core.config import ClientConfig
from wargamer.core.endpoints import EndpointResolver
from wargamer.core.exceptions import ConfigError, RemoteAPIError, TransportError, UnknownRealmOrProduct
from wargamer.core.models import Envelope
from wargamer.core.types import APIResponse, HttpMethod, RawResponse
from wargamer.modules.authentication import Authentication
from wargamer.security.redaction import sanitize_for_log

_MISSING = object()


@dataclass(frozen=True, slots=True)
class ClientContext:
    """Shared context injected into every client."""

    config: ClientConfig
    caches: CacheManager
    requester: Requester
    endpoints: EndpointResolver
    logger: logging.Logger


def normalize_parameter_value(value: Any) -> Any:
    """Shape a parameter value the way the API expects it."""

    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        return ",".join(str(normalize_parameter_value(v)) for v in items)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def normalize_params(params: Mapping[str, Any]) -> dict[str, Any]:
    return {k: normalize_parameter_value(v) for k, v in params.items() if v is not None}


def response_cache_key(url: str, params: Mapping[str, Any]) -> str:
    # application_id is left out: it identifies the caller, not the data.
    rest = {k: v for k, v in params.items() if k != "application_id"}
    canonical = json.dumps(rest, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha1(f"{url}{canonical}".encode("utf-8")).hexdigest()


class BaseClient:
    """Base API client.

    Args:
        application_id: Application id issued by the developer portal.
        realm: Realm/region this client talks to (``ru``, ``eu``, ``na``, ...).
        access_token: Optional token for personal data endpoints.
        language: Default localization language for responses.
        config: Full configuration; explicit arguments win over it.
        caches: Cache registry. Defaults to the process-wide one.
        requester: Transport. Defaults to an :class:`HTTPRequester`.
    """

    product: str = ""

    def __init__(
        self,
        application_id: str | None = None,
        realm: str | None = None,
        *,
        access_token: str | None = None,
        language: str | None = None,
        config: ClientConfig | None = None,
        caches: CacheManager | None = None,
        requester: Requester | None = None,
        endpoints: EndpointResolver | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        cfg = config or ClientConfig()
        endpoints = endpoints or EndpointResolver()

        application_id = cfg.application_id if application_id is None else application_id
        realm = cfg.realm if realm is None else realm

        if not isinstance(realm, str) or not endpoints.knows_realm(realm):
            raise UnknownRealmOrProduct(str(realm), self.product)
        if not isinstance(application_id, str) or not application_id:
            raise ConfigError("Must specify an application ID for the client.")

        self._owns_requester = requester is None
        self.ctx = ClientContext(
            config=cfg,
            caches=caches or default_cache_manager(),
            requester=requester or HTTPRequester(cfg.http),
            endpoints=endpoints,
            logger=logger or logging.getLogger(f"wargamer.{self.product}"),
        )

        self.realm = realm.lower()
        self.application_id = application_id
        self.access_token = access_token if access_token is not None else cfg.access_token
        self.language = language if language is not None else cfg.language
        self.base_uri = endpoints.base_uri(self.realm, self.product)

        self.authentication = Authentication(self)

    async def aclose(self) -> None:
        if self._owns_requester and isinstance(self.ctx.requester, HTTPRequester):
            await self.ctx.requester.aclose()

    async def __aenter__(self) -> BaseClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def response_cache_id(self) -> str:
        return f"{self.product}:{self.realm}:responses"

    def cache_prefix(self, name: str) -> str:
        """Names the caches a module shares with every client of the same product/realm/language."""

        parts = [self.product, self.realm, self.language, name]
        return ":".join(p for p in parts if p)

    def _response_cache(self) -> Cache:
        caches = self.ctx.caches
        cache = caches.get(self.response_cache_id)
        if cache is None:
            cfg = self.ctx.config.cache
            cache = caches.create(
                self.response_cache_id,
                cfg.response_ttl_s,
                max_size=cfg.response_max_size,
            )
        return cache

    def build_payload(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "application_id": self.application_id,
            "access_token": self.access_token,
            "language": self.language,
        }
        payload.update(params or {})
        return normalize_params(payload)

    async def get(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        *,
        realm: str | None = None,
        product: str | None = None,
        use_cache: bool = True,
    ) -> APIResponse:
        """GET an API method. ``use_cache=False`` skips the response cache for this call."""

        return await self.request(
            method, params, http_method=HttpMethod.GET, realm=realm, product=product, use_cache=use_cache
        )

    async def post(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        *,
        realm: str | None = None,
        product: str | None = None,
    ) -> APIResponse:
        return await self.request(method, params, http_method=HttpMethod.POST, realm=realm, product=product)

    async def request(
        self,
        api_method: str,
        params: Mapping[str, Any] | None = None,
        *,
        http_method: str = HttpMethod.GET,
        realm: str | None = None,
        product: str | None = None,
        use_cache: bool = True,
    ) -> APIResponse:
        if not isinstance(api_method, str):
            raise TypeError("Expected API method to be a string.")

        http_method = str(http_method).upper()
        if http_method not in (HttpMethod.GET, HttpMethod.POST):
            raise ValueError(f"unsupported HTTP method: {http_method}")

        method = api_method.strip("/").lower()
        request_realm = (realm or self.realm).lower()
        request_product = (product or self.product).lower()
        url = self.ctx.endpoints.method_url(request_realm, request_product, method)
        payload = self.build_payload(params)

        use_cache = use_cache and http_method == HttpMethod.GET and self.ctx.config.cache.cache_responses
        cache_key = response_cache_key(url, payload) if use_cache else None
        if cache_key is not None:
            cached = self._response_cache().get(cache_key, _MISSING)
            if cached is not _MISSING:
                # hand out copies so callers cannot mutate the cached body
                return APIResponse(realm=request_realm, method=method, body=copy.deepcopy(cached), cached=True)

        self.ctx.logger.debug(
            "api_request",
            extra={"url": url, "http_method": http_method, "params": sanitize_for_log(payload)},
        )
        raw = await self.ctx.requester.send(url, http_method, payload)
        response = self.parse_response(raw, method=method, realm=request_realm)

        # only successful envelopes are ever cached
        if cache_key is not None:
            self._response_cache().set(cache_key, copy.deepcopy(response.body))
        return response

    def parse_response(self, raw: RawResponse, *, method: str, realm: str) -> APIResponse:
        body = raw.body
        if not isinstance(body, dict):
            raise TransportError(
                f"unexpected response body (HTTP {raw.status_code})",
                status_code=raw.status_code,
                url=raw.url,
            )

        try:
            envelope = Envelope.model_validate(body)
        except ValidationError as e:
            raise TransportError(
                f"malformed response envelope (HTTP {raw.status_code})",
                status_code=raw.status_code,
                url=raw.url,
            ) from e

        if envelope.failed:
            error = envelope.error
            self.ctx.logger.warning(
                "api_error",
                extra={"url": raw.url, "status_code": raw.status_code, "error": error.model_dump() if error else None},
            )
            raise RemoteAPIError(
                status_code=raw.status_code,
                url=raw.url,
                method=method,
                realm=realm,
                code=error.code if error else None,
                message=error.message if error else "UNKNOWN_ERROR",
                field=error.field if error else None,
                value=error.value if error else None,
            )

        if raw.status_code >= 400:
            raise TransportError(
                f"HTTP {raw.status_code} without error envelope",
                status_code=raw.status_code,
                url=raw.url,
            )

        return APIResponse(realm=realm, method=method, body=body)

