"""Service health and cache state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from resticstat import __version__
from resticstat.config import config_to_flat

if TYPE_CHECKING:
    from resticstat.core.services import Services


def get_status(svc: Services) -> dict:
    """Aggregate cache and refresh health. Never triggers a refresh."""
    cache = svc.cache
    entry = cache.entry
    age = cache.age()

    health = svc.refresh_stats.health
    result = {
        "version": __version__,
        "status": "degraded" if health in ("degraded", "unhealthy") else "healthy",
        "source": svc.source.get_backend_name(),
        "cache": {
            "populated": entry is not None,
            "profiles": len(entry.profiles) if entry else 0,
            "age_seconds": round(age, 1) if age is not None else None,
            "ttl_seconds": cache.ttl_seconds,
            "fresh": age is not None and age < cache.ttl_seconds,
            "refreshing": cache.refreshing,
            "completed_at": entry.completed_wall.isoformat() if entry else None,
        },
        "refresh": svc.refresh_stats.to_dict(),
        "config": config_to_flat(svc.config),
    }
    return result
