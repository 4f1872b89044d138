"""Telemetry source factory with pluggable provider registry.

Built-in providers: resticprofile.
Register custom providers via ``register_source_provider(name, factory_fn)``.
"""

from __future__ import annotations

import logging
from typing import Callable

from resticstat.config import SourceConfig
from resticstat.sources.interface import TelemetrySource

logger = logging.getLogger(__name__)

# Provider registry: name -> factory function(config) -> TelemetrySource
_providers: dict[str, Callable[[SourceConfig], TelemetrySource]] = {}


def register_source_provider(
    name: str,
    factory: Callable[[SourceConfig], TelemetrySource],
) -> None:
    """Register a custom telemetry source.

    Args:
        name: Backend name (matches RESTICSTAT_SOURCE_BACKEND env var).
        factory: Callable that takes SourceConfig and returns a TelemetrySource.
    """
    _providers[name] = factory
    logger.info("Registered source provider: %s", name)


def get_source(config: SourceConfig) -> TelemetrySource:
    """Return the configured telemetry source.

    Checks the plugin registry first, then falls back to built-in providers.
    """
    if config.backend in _providers:
        return _providers[config.backend](config)

    if config.backend == "resticprofile":
        from resticstat.sources.resticprofile import ResticProfileSource
        return ResticProfileSource(config)

    available = sorted(set(BUILT_IN_PROVIDERS + list(_providers.keys())))
    raise ValueError(
        f"Unknown source backend: {config.backend!r}. "
        f"Available: {', '.join(available)}"
    )


# For error messages and discovery
BUILT_IN_PROVIDERS = ["resticprofile"]
