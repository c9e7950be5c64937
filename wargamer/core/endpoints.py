"""wargamer.core.endpoints

Realm + product -> base URI.

Every product lives on its own host; the realm picks the TLD.
"""

from __future__ import annotations

from collections.abc import Callable

from wargamer.core.exceptions import UnknownRealmOrProduct
from wargamer.core.types import Product, Realm

REALM_TLD: dict[str, str] = {
    Realm.RU: "ru",
    Realm.EU: "eu",
    Realm.NA: "com",
    Realm.KR: "kr",
    Realm.ASIA: "asia",
    Realm.XBOX: "xbox",
    Realm.PS4: "ps4",
}

BASE_URI: dict[str, Callable[[str], str]] = {
    Product.WOT: lambda tld: f"https://api.worldoftanks.{tld}/wot",
    Product.WOTB: lambda tld: f"https://api.wotblitz.{tld}/wotb",
    Product.WOTX: lambda tld: f"https://api-{tld}-console.worldoftanks.com/wotx",
    Product.WOWS: lambda tld: f"https://api.worldofwarships.{tld}/wows",
    Product.WOWP: lambda tld: f"https://api.worldofwarplanes.{tld}/wowp",
    Product.WGN: lambda tld: f"https://api.worldoftanks.{tld}/wgn",
}


class EndpointResolver:
    """Maps (realm, product) to the API base URI."""

    def __init__(
        self,
        realm_tld: dict[str, str] | None = None,
        base_uri: dict[str, Callable[[str], str]] | None = None,
    ) -> None:
        self._realm_tld = dict(REALM_TLD if realm_tld is None else realm_tld)
        self._base_uri = dict(BASE_URI if base_uri is None else base_uri)

    def knows_realm(self, realm: str) -> bool:
        return str(realm).lower() in self._realm_tld

    def base_uri(self, realm: str, product: str) -> str:
        r = str(realm).lower()
        p = str(product).lower()
        if r not in self._realm_tld or p not in self._base_uri:
            raise UnknownRealmOrProduct(realm, product)
        return self._base_uri[p](self._realm_tld[r])

    def method_url(self, realm: str, product: str, method: str) -> str:
        """Full URL for an API method, e.g. ``encyclopedia/vehicles``."""

        return f"{self.base_uri(realm, product)}/{method.strip('/').lower()}/"
