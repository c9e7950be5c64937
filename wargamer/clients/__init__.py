"""wargamer.clients

One client class per product, all registered by product code.
"""

from .base import BaseClient, ClientContext
from .registry import create_client, discover, get_client, list_clients, register
from .wgn import Wargaming
from .wot import WorldOfTanks
from .wotb import WorldOfTanksBlitz
from .wotx import WorldOfTanksConsole
from .wowp import WorldOfWarplanes
from .wows import WorldOfWarships

__all__ = [
    "BaseClient",
    "ClientContext",
    "Wargaming",
    "WorldOfTanks",
    "WorldOfTanksBlitz",
    "WorldOfTanksConsole",
    "WorldOfWarplanes",
    "WorldOfWarships",
    "create_client",
    "discover",
    "get_client",
    "list_clients",
    "register",
]
