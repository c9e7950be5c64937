"""wargamer.core.client

Shared HTTP requester with:
- rate limiting (token bucket)
- optional retries for network failures (exponential backoff)
- simple circuit breaker

It speaks HTTP and JSON, nothing more. Envelopes are the client's business.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import httpx

from wargamer.core.config import HttpConfig
from wargamer.core.exceptions import TransportError
from wargamer.core.types import HttpMethod, RawResponse


@runtime_checkable
class Requester(Protocol):
    async def send(self, url: str, method: str, params: Mapping[str, Any]) -> RawResponse: ...


class _TokenBucket:
    def __init__(self, rate_per_sec: float) -> None:
        self.rate = max(rate_per_sec, 0.001)
        self.capacity = max(1.0, self.rate)
        self.tokens = self.capacity
        self.updated_at = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        while True:
            async with self._lock:
                now = time.monotonic()
                elapsed = now - self.updated_at
                self.updated_at = now
                self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
                if self.tokens >= 1.0:
                    self.tokens -= 1.0
                    return
                # wait for enough tokens
                wait_s = (1.0 - self.tokens) / self.rate
            await asyncio.sleep(wait_s)


class CircuitBreaker:
    def __init__(self, threshold: int, cooldown_s: float) -> None:
        self.threshold = threshold
        self.cooldown_s = cooldown_s
        self.failures = 0
        self.opened_at: float | None = None

    def allow(self) -> bool:
        if self.opened_at is None:
            return True
        if (time.monotonic() - self.opened_at) >= self.cooldown_s:
            self.failures = 0
            self.opened_at = None
            return True
        return False

    def on_success(self) -> None:
        self.failures = 0
        self.opened_at = None

    def on_failure(self) -> None:
        self.failures += 1
        if self.failures >= self.threshold:
            self.opened_at = time.monotonic()


class HTTPRequester:
    """httpx-backed :class:`Requester`.

    GET sends params as the query string, POST sends them form-encoded. Any
    response with a JSON body is handed back regardless of status; deciding
    what a 4xx with a structured error means is left to the caller.
    """

    def __init__(
        self,
        config: HttpConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or HttpConfig()
        self._bucket = _TokenBucket(self.config.rate_limit_rps)
        self._breaker = CircuitBreaker(
            threshold=self.config.circuit_breaker_threshold,
            cooldown_s=self.config.circuit_breaker_cooldown_s,
        )
        self._client = httpx.AsyncClient(timeout=self.config.timeout_s, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HTTPRequester:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, params: Mapping[str, Any]) -> httpx.Response:
        if method == HttpMethod.GET:
            return await self._client.get(url, params=dict(params))
        if method == HttpMethod.POST:
            return await self._client.post(url, data=dict(params))
        raise ValueError(f"unsupported HTTP method: {method}")

    async def send(self, url: str, method: str, params: Mapping[str, Any]) -> RawResponse:
        method = str(method).upper()

        if not self._breaker.allow():
            raise TransportError("circuit breaker open", url=url)

        await self._bucket.acquire()

        for attempt in range(self.config.max_retries + 1):
            try:
                resp = await self._request(method, url, params)
                break
            except httpx.TransportError as e:
                self._breaker.on_failure()
                if attempt >= self.config.max_retries:
                    raise TransportError(f"{type(e).__name__}: {e}", url=url) from e
                await asyncio.sleep(min(2**attempt, 8))

        if resp.status_code >= 500:
            self._breaker.on_failure()
        else:
            self._breaker.on_success()

        try:
            body: Any = resp.json()
        except ValueError as e:
            raise TransportError(
                f"undecodable response body (HTTP {resp.status_code})",
                status_code=resp.status_code,
                url=url,
            ) from e

        return RawResponse(status_code=resp.status_code, body=body, url=url)
