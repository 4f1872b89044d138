"""resticstat REST API: read-only endpoints over the stats cache.

Each module under resticstat/api/ exports a register_routes(router, svc)
function that adds its endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resticstat import __version__
from resticstat.core.services import Services

logger = logging.getLogger(__name__)


def create_api(svc: Services) -> FastAPI:
    """Build the REST API as a FastAPI app.

    Designed to be mounted as a sub-app on the MCP Starlette parent.
    No lifespan needed: the parent handles worker lifecycle.
    """
    app = FastAPI(
        title="resticstat API",
        version=__version__,
        description="Cached resticprofile statistics per backup profile.",
        docs_url="/swagger",
        redoc_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=svc.config.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    router = APIRouter()

    from resticstat.api.stats import register_routes as reg_stats

    reg_stats(router, svc)

    app.include_router(router)
    return app
