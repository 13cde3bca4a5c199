"""FastAPI application entry point for the rendezvous broker."""

import logging
import sys

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from errors import register_error_handlers
from services.cache import CapabilityStatus, TTLCache
from services.datastore import Datastore
from services.rendezvous import RendezvousStore
from services.tiers import DurableTier, EphemeralTier, TierSelector

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def build_store() -> RendezvousStore:
    """Wire the process-wide tiers from settings."""
    cache = TTLCache(status=CapabilityStatus.parse(settings.ephemeral_status))
    return RendezvousStore(
        selector=TierSelector(cache.capability_status),
        ephemeral=EphemeralTier(cache, namespace=settings.instance_id, ttl_seconds=settings.ttl_seconds),
        durable=DurableTier(Datastore(settings.db_path)),
    )


def create_app(store: RendezvousStore | None = None) -> FastAPI:
    # No docs routes: every single-segment GET path is a rendezvous key.
    app = FastAPI(title="Rendezvous Broker", version="1.0.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.rendezvous = store or build_store()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.rendezvous import router as rendezvous_router

    # Ops routes live under a two-segment prefix and are registered first;
    # the rendezvous fetch route matches every other GET path.
    app.include_router(health_router)
    app.include_router(rendezvous_router)

    @app.on_event("startup")
    async def _startup() -> None:
        problems = settings.validate()
        if problems:
            logger.warning("Configuration problems: %s", "; ".join(problems))
        await app.state.rendezvous.durable.init()

    return app


app = create_app()
