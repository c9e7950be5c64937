"""wargamer.clients.registry

Every product answers to its code.

Registry responsibilities:
- @register("wot") decorator
- lookup/list/create helpers
- module auto-discovery (import wargamer.clients.* to trigger decorators)
"""

from __future__ import annotations

import importlib
import pkgutil
from collections.abc import Callable
from typing import Any

from wargamer.clients.base import BaseClient
from wargamer.core.exceptions import UnknownRealmOrProduct

_REGISTRY: dict[str, type[BaseClient]] = {}
_DISCOVERED = False

_INFRA_MODULES = (".base", ".registry")


def register(product: str) -> Callable[[type[Any]], type[Any]]:
    def _decorator(cls: type[Any]) -> type[Any]:
        key = str(product).lower()
        if key in _REGISTRY and _REGISTRY[key] is not cls:
            raise ValueError(f"client already registered: {key}")

        setattr(cls, "product", key)
        _REGISTRY[key] = cls
        return cls

    return _decorator


def discover() -> None:
    global _DISCOVERED
    if _DISCOVERED:
        return

    pkg_name = "wargamer.clients"
    pkg = importlib.import_module(pkg_name)

    for m in pkgutil.iter_modules(pkg.__path__, prefix=f"{pkg_name}."):
        if m.name.endswith(_INFRA_MODULES):
            continue
        importlib.import_module(m.name)

    _DISCOVERED = True


def get_client(product: str) -> type[BaseClient]:
    key = str(product).lower()
    if key not in _REGISTRY:
        discover()
    if key not in _REGISTRY:
        raise UnknownRealmOrProduct("", key)
    return _REGISTRY[key]


def list_clients() -> list[str]:
    discover()
    return sorted(_REGISTRY.keys())


def create_client(product: str, **options: Any) -> BaseClient:
    """Instantiate the client registered for ``product`` with ``options``."""

    return get_client(product)(**options)


def _reset_for_tests() -> None:
    """Clear the registry and unload product modules so decorators can re-run."""

    import sys

    global _DISCOVERED
    _REGISTRY.clear()
    _DISCOVERED = False

    for key in list(sys.modules.keys()):
        if not key.startswith("wargamer.clients."):
            continue
        if key.endswith(_INFRA_MODULES):
            continue
        sys.modules.pop(key, None)
