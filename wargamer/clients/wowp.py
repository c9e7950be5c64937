"""wargamer.clients.wowp

World of Warplanes.
"""

from __future__ import annotations

from typing import Any

from wargamer.clients.base import BaseClient
from wargamer.clients.registry import register
from wargamer.core.types import Product
from wargamer.modules.accounts import Accounts
from wargamer.modules.encyclopedia import WarplanesEncyclopedia


@register(Product.WOWP)
class WorldOfWarplanes(BaseClient):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.accounts = Accounts(self)
        self.encyclopedia = WarplanesEncyclopedia(self)
