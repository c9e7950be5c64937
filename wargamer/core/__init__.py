"""wargamer.core

Core primitives.

Everything else in wargamer builds on this package; nothing here imports from it.
"""

from .cache import Cache, CacheEntry, CacheManager, CacheMeta, default_cache_manager
from .config import ClientConfig
from .endpoints import EndpointResolver
from .exceptions import WargamerError
from .time import utc_now
from .types import APIResponse, ById, ByName, Identifier, Product, Realm, parse_identifier

__all__ = [
    "APIResponse",
    "ById",
    "ByName",
    "Cache",
    "CacheEntry",
    "CacheManager",
    "CacheMeta",
    "ClientConfig",
    "EndpointResolver",
    "Identifier",
    "Product",
    "Realm",
    "WargamerError",
    "default_cache_manager",
    "parse_identifier",
    "utc_now",
]
