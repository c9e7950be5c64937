"""wargamer.modules.base

A module groups the methods of one API section (accounts, tankopedia, ...) on a client.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from wargamer.search.catalog import DEFAULT_INFO_METHOD, Localizer
from wargamer.search.resolver import EntityResolver

if TYPE_CHECKING:
    from wargamer.clients.base import BaseClient


class ClientModule:
    def __init__(self, client: BaseClient, name: str) -> None:
        self.client = client
        self.name = name

    @property
    def cache_prefix(self) -> str:
        return self.client.cache_prefix(self.name)

    def resolver(
        self,
        *,
        search_fields: Sequence[str],
        identifier_key: str,
        index_endpoint: str,
        data_endpoint: str,
    ) -> EntityResolver:
        ctx = self.client.ctx
        return EntityResolver(
            self.client,
            caches=ctx.caches,
            prefix=self.cache_prefix,
            search_fields=search_fields,
            identifier_key=identifier_key,
            index_endpoint=index_endpoint,
            data_endpoint=data_endpoint,
            threshold=ctx.config.search.threshold,
            index_ttl_s=ctx.config.cache.index_ttl_s,
            logger=ctx.logger,
        )

    def localizer(self, method: str = DEFAULT_INFO_METHOD) -> Localizer:
        ctx = self.client.ctx
        return Localizer(
            self.client,
            caches=ctx.caches,
            prefix=self.cache_prefix,
            method=method,
            ttl_s=ctx.config.cache.meta_ttl_s,
            logger=ctx.logger,
        )
