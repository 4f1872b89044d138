"""Stats endpoints: per-profile statistics and service status."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Path

from resticstat.core.services import Services
from resticstat.core.status import get_status

logger = logging.getLogger(__name__)


def register_routes(router: APIRouter, svc: Services, **kw):
    cache = svc.cache

    def _profiles():
        try:
            return cache.query()
        except Exception as e:
            logger.exception("stats refresh failed")
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/stats")
    def api_stats():
        return [p.to_dict() for p in _profiles()]

    @router.get("/stats/{name}")
    def api_stats_profile(name: str = Path(...)):
        for p in _profiles():
            if p.name == name:
                return p.to_dict()
        raise HTTPException(status_code=404, detail=f"Profile {name!r} not found")

    @router.get("/status")
    def api_status():
        return get_status(svc)
