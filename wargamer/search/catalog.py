"""wargamer.search.catalog

Catalog helpers that sit next to entity resolution:

- ``Localizer``: slug -> display value through the translation tables
- ``extract_top_modules``: the most expensive module of each type
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from wargamer.core.cache import Cache, CacheManager
from wargamer.core.exceptions import InvalidTranslationType
from wargamer.search.resolver import CatalogClient

DEFAULT_INFO_METHOD = "encyclopedia/info"

_MISSING = object()


class Localizer:
    """Translates slugs using one of the tables returned by an info endpoint.

    Tables are cached under ``<prefix>:meta``, keyed by translation type.
    An unknown type is an error; an unknown slug is just ``None``.
    """

    def __init__(
        self,
        client: CatalogClient,
        *,
        caches: CacheManager,
        prefix: str,
        method: str = DEFAULT_INFO_METHOD,
        ttl_s: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.caches = caches
        self.prefix = prefix
        self.method = method
        self.ttl_s = ttl_s
        self.logger = logger or logging.getLogger("wargamer.localizer")

    @property
    def meta_cache_id(self) -> str:
        return f"{self.prefix}:meta"

    def _cache(self) -> Cache:
        cache = self.caches.get(self.meta_cache_id)
        if cache is None:
            cache = self.caches.create(self.meta_cache_id, self.ttl_s)
        return cache

    async def table(self, translation_type: str) -> Mapping[str, Any]:
        cache = self._cache()
        table = cache.get(translation_type, _MISSING)
        if table is not _MISSING:
            return table

        response = await self.client.get(self.method, use_cache=False)
        data = response.data
        table = data.get(translation_type) if isinstance(data, Mapping) else None
        if not isinstance(table, Mapping):
            raise InvalidTranslationType(translation_type)

        cache.set(translation_type, table)
        self.logger.debug(
            "translation_table_cached",
            extra={"localizer": self.prefix, "translation_type": translation_type, "entries": len(table)},
        )
        return table

    async def localize(self, translation_type: str, slug: str) -> Any | None:
        table = await self.table(translation_type)
        return table.get(slug)


def _cost(module: Mapping[str, Any], cost_field: str) -> float:
    value = module.get(cost_field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def extract_top_modules(
    module_tree: Mapping[Any, Mapping[str, Any]],
    cost_field: str = "cost",
) -> dict[str, Mapping[str, Any]]:
    """Return the most expensive module per ``type``.

    One linear pass with a strict comparison: on equal cost the first module seen wins.
    """

    top: dict[str, Mapping[str, Any]] = {}
    for module in module_tree.values():
        if not isinstance(module, Mapping):
            continue
        kind = module.get("type")
        if kind is None:
            continue
        if kind not in top or _cost(module, cost_field) > _cost(top[kind], cost_field):
            top[kind] = module
    return top
