"""resticstat MCP server. Entry point for the backup statistics service."""

import logging
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from resticstat.config import load_config
from resticstat.core.services import create_services
from resticstat.core.status import get_status

# Base config from env vars (loaded at module import time).
_base_config = load_config()

# Configure logging
logging.basicConfig(
    level=getattr(logging, _base_config.log_level, logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("resticstat")

# Module-level services: populated before MCP tools execute.
_svc = None


def _init_services():
    """Build services once; later calls return the existing container."""
    global _svc
    if _svc is None:
        _svc = create_services(config=_base_config)
    return _svc


# ============================================================
# Lifecycle
# ============================================================

@asynccontextmanager
async def lifespan(server: FastMCP):
    """Create services and run the refresh worker for the server's lifetime."""
    owned = _svc is None
    svc = _init_services()
    if owned:
        svc.start()
    try:
        yield {}
    finally:
        if owned:
            svc.stop()
            logger.info("resticstat stopped.")


mcp_kwargs = dict(
    name="resticstat",
    instructions=(
        "Backup statistics for resticprofile profiles.\n"
        "\n"
        "stats() returns one record per profile: restore size, raw/compressed "
        "repository size, compression ratio, snapshot count, and how long ago "
        "each backed-up path was last snapshotted. Results are cached; the first "
        "call after the cache expires can take a while.\n"
        "status() reports cache age and refresh health without triggering work."
    ),
    lifespan=lifespan,
)
if _base_config.transport == "http":
    mcp_kwargs["host"] = _base_config.http_host
    mcp_kwargs["port"] = _base_config.http_port

mcp = FastMCP(**mcp_kwargs)


# ============================================================
# Tool 1: stats
# ============================================================

@mcp.tool()
def stats(profile: str | None = None) -> list[dict] | dict:
    """Backup statistics per resticprofile profile.

    WHEN TO USE: "how big is the backup", "when did X last back up",
    "what's the compression ratio", checking that every profile is still
    producing snapshots.

    Args:
        profile: Only return this profile's record. Omit for all profiles.
    """
    try:
        profiles = _init_services().cache.query()
        if profile is None:
            return [p.to_dict() for p in profiles]
        for p in profiles:
            if p.name == profile:
                return p.to_dict()
        return {"error": f"Profile {profile!r} not found"}
    except Exception as e:
        logger.exception("stats failed")
        return {"error": f"Internal error: {e}"}


# ============================================================
# Tool 2: status
# ============================================================

@mcp.tool()
def status() -> dict:
    """Service health: cache age, last refresh outcome, skipped profiles.

    Quick diagnostic tool: no parameters required, never runs resticprofile.
    """
    try:
        return get_status(_init_services())
    except Exception as e:
        logger.exception("status failed")
        return {"error": f"Internal error: {e}"}


# ============================================================
# Entry point
# ============================================================

def main():
    """Run the resticstat server."""
    logger.info("Data root: %s", _base_config.data_root)
    logger.info("Resticprofile binary: %s", _base_config.source.binary)
    logger.info("Cache TTL: %ds", _base_config.cache.ttl_seconds)

    if _base_config.transport == "http":
        import uvicorn
        from resticstat.api import create_api

        # Get MCP's Starlette app (parent: owns lifespan, serves /mcp)
        mcp_app = mcp.streamable_http_app()
        _mcp_lifespan = mcp_app.router.lifespan_context

        svc = _init_services()

        api = create_api(svc)
        mcp_app.mount("/api", api)

        @asynccontextmanager
        async def combined_lifespan(app):
            svc.start()
            try:
                async with _mcp_lifespan(app) as state:
                    yield state
            finally:
                svc.stop()
                logger.info("resticstat stopped.")

        mcp_app.router.lifespan_context = combined_lifespan

        logger.info(
            "Starting resticstat (HTTP on %s:%d, MCP at /mcp, API at /api)",
            _base_config.http_host, _base_config.http_port,
        )
        uvicorn.run(mcp_app, host=_base_config.http_host, port=_base_config.http_port)
    else:
        logger.info("Starting resticstat MCP server (stdio)")
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
