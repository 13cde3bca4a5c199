"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Request

from config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/_ops")


@router.get("/ready")
async def ready() -> dict:
    """Lightweight readiness check — no backend calls."""
    return {"status": "ok", "service": "rendezvous", "commit": settings.git_sha}


@router.get("/health")
async def health(request: Request) -> dict:
    """Report which tier is live and whether the datastore answers."""
    rendezvous = request.app.state.rendezvous
    result = {
        "status": "ok",
        "service": "rendezvous",
        "commit": settings.git_sha,
        "tier": rendezvous.live_tier().name,
        "datastore": "not_tested",
    }

    try:
        await rendezvous.durable.ping()
        result["datastore"] = "connected"
    except Exception as e:
        logger.exception("Datastore health check failed")
        result["datastore"] = "error"
        result["datastore_error"] = str(e)

    return result
