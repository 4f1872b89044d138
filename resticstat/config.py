"""Configuration management. All settings from environment variables with sensible defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SECONDS = 3600  # 1 hour


@dataclass(frozen=True)
class SourceConfig:
    backend: str = "resticprofile"  # "resticprofile" or registered provider name
    binary: str = "/resticprofile"  # path to the resticprofile executable
    timeout: int = 600              # seconds per invocation


@dataclass(frozen=True)
class CacheConfig:
    ttl_seconds: int = DEFAULT_CACHE_SECONDS
    refresh_interval: int = 0  # background refresh every N seconds. 0 = disabled


@dataclass(frozen=True)
class Config:
    data_root: str = "/data"
    source: SourceConfig = field(default_factory=SourceConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    reduced_mode: bool = False  # only query the latest snapshot per profile
    transport: str = "http"  # "http" or "stdio"
    http_host: str = "0.0.0.0"
    http_port: int = 8080
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


_BOOL_TRUTHY = {"true", "1", "yes"}


def _parse_cors_origins(raw: str) -> list[str]:
    """Parse comma-separated CORS origins. '*' means allow all."""
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def _positive_int(raw: str | None, default: int, name: str) -> int:
    """Parse a strictly positive int, falling back to default on garbage."""
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %d", name, raw, default)
        return default
    return value


def config_to_flat(config: Config) -> dict[str, Any]:
    """Serialize config to a flat dict with dot-notation keys for the status view."""
    result: dict[str, Any] = {}

    for f in fields(config):
        val = getattr(config, f.name)
        if hasattr(val, "__dataclass_fields__"):
            for sf in fields(val):
                result[f"{f.name}.{sf.name}"] = getattr(val, sf.name)
        else:
            # Skip list fields (cors_origins): not useful in flat form
            if isinstance(val, list):
                continue
            result[f.name] = val

    return result


def load_config() -> Config:
    """Load configuration from environment variables.

    The unprefixed DATA_ROOT, RESTICPROFILE_BINARY and CACHE_SECONDS are
    honoured when the RESTICSTAT_* variant is unset.
    """
    ttl_env = os.getenv("RESTICSTAT_CACHE_SECONDS", os.getenv("CACHE_SECONDS"))

    return Config(
        data_root=os.getenv("RESTICSTAT_DATA_ROOT", os.getenv("DATA_ROOT", "/data")),
        source=SourceConfig(
            backend=os.getenv("RESTICSTAT_SOURCE_BACKEND", "resticprofile"),
            binary=os.getenv(
                "RESTICSTAT_RESTICPROFILE_BINARY",
                os.getenv("RESTICPROFILE_BINARY", "/resticprofile"),
            ),
            timeout=_positive_int(os.getenv("RESTICSTAT_SOURCE_TIMEOUT"), 600, "RESTICSTAT_SOURCE_TIMEOUT"),
        ),
        cache=CacheConfig(
            ttl_seconds=_positive_int(ttl_env, DEFAULT_CACHE_SECONDS, "CACHE_SECONDS"),
            refresh_interval=int(os.getenv("RESTICSTAT_REFRESH_INTERVAL", "0")),
        ),
        reduced_mode=os.getenv("RESTICSTAT_REDUCED_MODE", "false").lower() in _BOOL_TRUTHY,
        transport=os.getenv("RESTICSTAT_TRANSPORT", "http"),
        http_host=os.getenv("RESTICSTAT_HTTP_HOST", "0.0.0.0"),
        http_port=int(os.getenv("RESTICSTAT_HTTP_PORT", "8080")),
        cors_origins=_parse_cors_origins(os.getenv("RESTICSTAT_CORS_ORIGINS", "*")),
        log_level=os.getenv("RESTICSTAT_LOG_LEVEL", "INFO").upper(),
    )
