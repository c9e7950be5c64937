"""wargamer.modules

API sections attached to clients.
"""

from .accounts import Accounts
from .authentication import Authentication
from .base import ClientModule
from .encyclopedia import WarplanesEncyclopedia, WarshipsEncyclopedia
from .tankopedia import Tankopedia

__all__ = [
    "Accounts",
    "Authentication",
    "ClientModule",
    "Tankopedia",
    "WarplanesEncyclopedia",
    "WarshipsEncyclopedia",
]
