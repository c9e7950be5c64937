"""wargamer.search.resolver

Identifier in, catalog record out.

Resolution protocol:
- ``ById(n)``: one detail lookup keyed by ``n``. No index involved.
- ``ByName(s)``: fuzzy-match ``s`` against the catalog listing, then one detail
  lookup for the best candidate. The listing is fetched once per names-cache
  lifetime; the constructed index *is* the cached value.

Builds are single-flight. While a listing is being fetched, the names slot holds
the build task and every other caller awaits that task instead of fetching
again. Only a finished index is ever committed; a failed build empties the slot.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from wargamer.core.cache import Cache, CacheManager
from wargamer.core.types import APIResponse, ById, parse_identifier
from wargamer.search.fuzzy import DEFAULT_THRESHOLD, FuzzyIndex

INDEX_SLOT = "index"


class CatalogClient(Protocol):
    async def get(
        self, method: str, params: Mapping[str, Any] | None = None, *, use_cache: bool = True
    ) -> APIResponse: ...


def listing_records(data: Any) -> list[Mapping[str, Any]]:
    """Listings arrive keyed by primary key; keep them in listing order."""

    if isinstance(data, Mapping):
        rows: Iterable[Any] = data.values()
    elif isinstance(data, list):
        rows = data
    else:
        return []
    return [row for row in rows if isinstance(row, Mapping)]


def _joinable(build: asyncio.Future[Any]) -> bool:
    # A build left behind by a finished event loop cannot be awaited from this one.
    if build.get_loop() is not asyncio.get_running_loop():
        return False
    if not build.done():
        return True
    return not build.cancelled() and build.exception() is None


class NamesCache:
    """The names cache: one slot, holding a :class:`FuzzyIndex` or the task building it."""

    def __init__(self, cache: Cache) -> None:
        self.cache = cache

    def current(self) -> FuzzyIndex | asyncio.Future[FuzzyIndex] | None:
        return self.cache.get(INDEX_SLOT)

    def store(self, index: FuzzyIndex) -> None:
        self.cache.set(INDEX_SLOT, index)

    def mark_pending(self, build: asyncio.Future[FuzzyIndex]) -> None:
        self.cache.set(INDEX_SLOT, build)

    def discard(self, build: asyncio.Future[FuzzyIndex]) -> None:
        # Only drop our own marker; a newer index or build may have replaced it.
        if self.cache.peek(INDEX_SLOT) is build:
            self.cache.delete(INDEX_SLOT)

    def clear(self) -> None:
        self.cache.clear()


class EntityResolver:
    """Resolves vehicles, ships, planes (any catalog entity) by id or by name.

    Resolvers sharing a ``prefix`` and a :class:`CacheManager` share one names cache.
    """

    def __init__(
        self,
        client: CatalogClient,
        *,
        caches: CacheManager,
        prefix: str,
        search_fields: Sequence[str],
        identifier_key: str,
        index_endpoint: str,
        data_endpoint: str,
        threshold: float = DEFAULT_THRESHOLD,
        index_ttl_s: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not search_fields:
            raise ValueError("search_fields must name at least one field")

        self.client = client
        self.caches = caches
        self.prefix = prefix
        self.search_fields = tuple(search_fields)
        self.identifier_key = identifier_key
        self.index_endpoint = index_endpoint
        self.data_endpoint = data_endpoint
        self.threshold = threshold
        self.index_ttl_s = index_ttl_s
        self.logger = logger or logging.getLogger("wargamer.resolver")

    @property
    def names_cache_id(self) -> str:
        return f"{self.prefix}:names"

    def names_cache(self) -> NamesCache:
        cache = self.caches.get(self.names_cache_id)
        if cache is None:
            cache = self.caches.create(self.names_cache_id, self.index_ttl_s)
        return NamesCache(cache)

    async def resolve(self, identifier: object) -> dict[str, Any] | None:
        """Resolve an int id or a free-text name to the full detail record.

        Returns ``None`` when nothing matches. Raises ``InvalidIdentifierType``
        for any other input, before touching the network.
        """

        ident = parse_identifier(identifier)

        if isinstance(ident, ById):
            record = await self.fetch_record(ident.value)
            self.logger.debug(
                "entity_resolved",
                extra={"resolver": self.prefix, "path": "id", "identifier": ident.value, "found": record is not None},
            )
            return record

        index_cached = isinstance(self.names_cache().cache.peek(INDEX_SLOT), FuzzyIndex)
        index = await self.index()
        match = index.best(ident.value)
        if match is None:
            self.logger.debug(
                "entity_no_match",
                extra={
                    "resolver": self.prefix,
                    "identifier": ident.value,
                    "candidates": len(index),
                    "index_cached": index_cached,
                },
            )
            return None

        matched_id = match.record.get(self.identifier_key)
        if matched_id is None:
            return None

        record = await self.fetch_record(matched_id)
        self.logger.debug(
            "entity_resolved",
            extra={
                "resolver": self.prefix,
                "path": "name",
                "identifier": ident.value,
                "matched_id": matched_id,
                "score": round(match.score, 4),
                "index_cached": index_cached,
                "found": record is not None,
            },
        )
        return record

    async def fetch_record(self, key: Any) -> dict[str, Any] | None:
        response = await self.client.get(self.data_endpoint, {self.identifier_key: key})
        data = response.data
        if not isinstance(data, Mapping):
            return None
        record = data.get(str(key))
        if record is None:
            record = data.get(key)
        return record if isinstance(record, dict) else None

    async def index(self) -> FuzzyIndex:
        """Return the cached index, joining or starting a build as needed."""

        names = self.names_cache()
        current = names.current()

        if isinstance(current, FuzzyIndex):
            return current

        if isinstance(current, asyncio.Future) and _joinable(current):
            self.logger.debug("entity_index_join_pending", extra={"resolver": self.prefix})
            return await asyncio.shield(current)

        build = asyncio.ensure_future(self._build(names))
        names.mark_pending(build)

        def _settle(task: asyncio.Future[FuzzyIndex]) -> None:
            if task.cancelled() or task.exception() is not None:
                names.discard(task)

        build.add_done_callback(_settle)
        return await asyncio.shield(build)

    async def _build(self, names: NamesCache) -> FuzzyIndex:
        fields = [*self.search_fields, self.identifier_key]
        # the names cache owns the listing lifetime, not the response cache
        response = await self.client.get(self.index_endpoint, {"fields": fields}, use_cache=False)
        index = FuzzyIndex(listing_records(response.data), keys=self.search_fields, threshold=self.threshold)
        names.store(index)
        self.logger.debug(
            "entity_index_built",
            extra={"resolver": self.prefix, "records": len(index), "endpoint": self.index_endpoint},
        )
        return index

    def invalidate(self) -> None:
        """Drop the cached index; the next name lookup refetches the listing."""

        self.names_cache().clear()
