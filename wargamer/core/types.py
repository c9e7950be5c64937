"""wargamer.core.types

Identifier and response types passed between layers.

Pydantic only parses the wire envelope (see ``models``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeAlias

from wargamer.core.exceptions import InvalidIdentifierType


class Realm(StrEnum):
    RU = "ru"
    EU = "eu"
    NA = "na"
    KR = "kr"
    ASIA = "asia"
    XBOX = "xbox"
    PS4 = "ps4"


class Product(StrEnum):
    WOT = "wot"  # World of Tanks
    WOTB = "wotb"  # World of Tanks Blitz
    WOTX = "wotx"  # World of Tanks Console
    WOWS = "wows"  # World of Warships
    WOWP = "wowp"  # World of Warplanes
    WGN = "wgn"  # Wargaming.net


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True, slots=True)
class ById:
    value: int


@dataclass(frozen=True, slots=True)
class ByName:
    value: str


Identifier: TypeAlias = ById | ByName


def parse_identifier(raw: object) -> Identifier:
    """Tag a caller-supplied identifier.

    ``bool`` is an ``int`` subclass in Python but never a primary key here.
    """

    if isinstance(raw, (ById, ByName)):
        return raw
    if isinstance(raw, int) and not isinstance(raw, bool):
        return ById(raw)
    if isinstance(raw, str):
        return ByName(raw)
    raise InvalidIdentifierType(raw)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """What a Requester hands back: status code + decoded JSON body."""

    status_code: int
    body: Any
    url: str


@dataclass(frozen=True, slots=True)
class APIResponse:
    """A successful envelope from the remote API."""

    realm: str
    method: str
    body: dict[str, Any] = field(default_factory=dict)
    cached: bool = False

    @property
    def data(self) -> Any:
        return self.body.get("data")

    @property
    def meta(self) -> Any:
        return self.body.get("meta")
