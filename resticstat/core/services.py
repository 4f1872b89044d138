"""Service container and factory. Centralizes component initialization."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from resticstat.config import Config, load_config
from resticstat.core.aggregator import StatsAggregator
from resticstat.core.cache import StatsCache
from resticstat.core.refresher import RefreshWorker
from resticstat.core.stats import RefreshStats
from resticstat.sources import get_source
from resticstat.sources.interface import TelemetrySource

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Holds all initialized resticstat components."""

    config: Config
    source: TelemetrySource
    refresh_stats: RefreshStats
    aggregator: StatsAggregator
    cache: StatsCache
    refresh_worker: RefreshWorker | None

    def start(self) -> None:
        if self.refresh_worker:
            self.refresh_worker.start()

    def stop(self) -> None:
        if self.refresh_worker:
            self.refresh_worker.stop()


def create_services(config: Config | None = None, source: TelemetrySource | None = None) -> Services:
    """Build all resticstat services from config.

    Args:
        config: Configuration to use. Loads from env if None.
        source: Telemetry source. Built from ``config.source`` if None.
    """
    if config is None:
        config = load_config()

    if source is None:
        source = get_source(config.source)

    refresh_stats = RefreshStats()
    aggregator = StatsAggregator(
        source,
        config.data_root,
        reduced_mode=config.reduced_mode,
        stats=refresh_stats,
    )
    cache = StatsCache(aggregator, config.cache.ttl_seconds, stats=refresh_stats)

    refresh_worker = None
    if config.cache.refresh_interval > 0:
        refresh_worker = RefreshWorker(cache, config.cache.refresh_interval)

    logger.info(
        "Services ready: root=%s source=%s ttl=%ds reduced=%s",
        config.data_root, source.get_backend_name(),
        config.cache.ttl_seconds, config.reduced_mode,
    )

    return Services(
        config=config,
        source=source,
        refresh_stats=refresh_stats,
        aggregator=aggregator,
        cache=cache,
        refresh_worker=refresh_worker,
    )
