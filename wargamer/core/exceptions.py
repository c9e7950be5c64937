"""wargamer.core.exceptions

Errors are part of the interface.

Callers get a record, ``None`` or one of these. Never a bare ``Exception``.
"""

from __future__ import annotations

from typing import Any


class WargamerError(Exception):
    """Base exception for wargamer."""


class ConfigError(WargamerError):
    """Configuration is missing, invalid, or inconsistent."""


class UnknownRealmOrProduct(ConfigError, ValueError):
    """No base URI exists for the requested realm/product pair."""

    def __init__(self, realm: str, product: str) -> None:
        super().__init__(f"Unknown realm or product: realm={realm!r} product={product!r}")
        self.realm = realm
        self.product = product


class InvalidIdentifierType(WargamerError, TypeError):
    """Entity identifiers are either an int (primary key) or a str (name)."""

    def __init__(self, identifier: object) -> None:
        super().__init__(
            f"Expected an int or str entity identifier, got {type(identifier).__name__}"
        )
        self.identifier = identifier


class InvalidTranslationType(WargamerError, LookupError):
    """The translation endpoint exposes no table for the requested type."""

    def __init__(self, translation_type: str) -> None:
        super().__init__(f"Invalid translation type: {translation_type}")
        self.translation_type = translation_type


class InvalidSearchType(WargamerError, ValueError):
    """Account searches are either 'exact' or 'startswith'."""


class AccessTokenMissing(WargamerError):
    """Token operations need a client that holds an access token."""


class RequestError(WargamerError):
    """A request to the remote API failed."""

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


class TransportError(RequestError):
    """Failure below the JSON envelope: network, timeout, non-2xx, undecodable body."""


class RemoteAPIError(RequestError):
    """The remote answered with a structured error envelope."""

    def __init__(
        self,
        *,
        status_code: int | None,
        url: str | None,
        method: str,
        realm: str,
        code: Any,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        super().__init__(
            f"{code}: {message}. Error field: {field} => {value}.",
            status_code=status_code,
            url=url,
        )
        self.method = method
        self.realm = realm
        self.code = code
        self.remote_message = message
        self.field = field
        self.value = value
