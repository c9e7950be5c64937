"""wargamer.core.config

Two config surfaces only:
1) an optional YAML file (``ClientConfig.from_yaml``)
2) environment variables, prefixed ``WARGAMER_`` (``WARGAMER_HTTP__TIMEOUT_S=5``)

Constructor arguments on the clients override both.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from wargamer.core.exceptions import ConfigError


class HttpConfig(BaseModel):
    timeout_s: float = 20.0
    rate_limit_rps: float = 10.0
    # The core never retries on its own; this only covers network-level failures.
    max_retries: int = 0
    circuit_breaker_threshold: int = 5
    circuit_breaker_cooldown_s: float = 30.0

    @field_validator("max_retries")
    @classmethod
    def max_retries_cannot_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_retries must be >= 0")
        return v


class CacheConfig(BaseModel):
    cache_responses: bool = True
    response_ttl_s: float | None = 600.0
    response_max_size: int | None = 250
    index_ttl_s: float | None = 600.0
    meta_ttl_s: float | None = 3600.0


class SearchConfig(BaseModel):
    threshold: float = 0.4

    @field_validator("threshold")
    @classmethod
    def threshold_in_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"search threshold must be within [0, 1], got {v}")
        return v


class ClientConfig(BaseSettings):
    """Root configuration for every client."""

    application_id: str = ""
    access_token: str | None = None
    language: str | None = None
    realm: str = "eu"

    http: HttpConfig = Field(default_factory=HttpConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    model_config = {"env_prefix": "WARGAMER_", "env_nested_delimiter": "__"}

    @classmethod
    def from_yaml(cls, path: Path) -> ClientConfig:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        raw = yaml.safe_load(path.read_text())
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")

        return cls(**raw)
