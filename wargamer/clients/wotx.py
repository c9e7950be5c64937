"""wargamer.clients.wotx

World of Tanks Console (``xbox`` and ``ps4`` realms).

Token endpoints for console clients are served from this product too, see
``wargamer.modules.authentication``.
"""

from __future__ import annotations

from typing import Any

from wargamer.clients.base import BaseClient
from wargamer.clients.registry import register
from wargamer.core.types import Product
from wargamer.modules.accounts import Accounts
from wargamer.modules.tankopedia import Tankopedia


@register(Product.WOTX)
class WorldOfTanksConsole(BaseClient):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.accounts = Accounts(self)
        self.tankopedia = Tankopedia(self)
