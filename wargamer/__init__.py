"""wargamer

Async client for the Wargaming.net public API.
"""

from .clients import (
    BaseClient,
    Wargaming,
    WorldOfTanks,
    WorldOfTanksBlitz,
    WorldOfTanksConsole,
    WorldOfWarplanes,
    WorldOfWarships,
    create_client,
)
from .core import Cache, CacheManager, ClientConfig, default_cache_manager
from .core.exceptions import (
    AccessTokenMissing,
    ConfigError,
    InvalidIdentifierType,
    InvalidSearchType,
    InvalidTranslationType,
    RemoteAPIError,
    RequestError,
    TransportError,
    UnknownRealmOrProduct,
    WargamerError,
)

__version__ = "0.1.0"

__all__ = [
    "AccessTokenMissing",
    "BaseClient",
    "Cache",
    "CacheManager",
    "ClientConfig",
    "ConfigError",
    "InvalidIdentifierType",
    "InvalidSearchType",
    "InvalidTranslationType",
    "RemoteAPIError",
    "RequestError",
    "TransportError",
    "UnknownRealmOrProduct",
    "Wargaming",
    "WorldOfTanks",
    "WorldOfTanksBlitz",
    "WorldOfTanksConsole",
    "WorldOfWarplanes",
    "WorldOfWarships",
    "WargamerError",
    "__version__",
    "create_client",
    "default_cache_manager",
]
