"""FastAPI application factory for the driver matching API."""

import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST

from driver_matching import __version__
from driver_matching.api.routes import drivers, rides
from driver_matching.matching.driver_registry import DriverRegistry
from driver_matching.matching.matching_engine import MatchingEngine
from driver_matching.metrics.prometheus_exporter import generate_metrics
from driver_matching.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(
    registry: DriverRegistry,
    engine: MatchingEngine,
    settings: Settings | None = None,
) -> FastAPI:
    """Create FastAPI application with injected dependencies.

    Args:
        registry: DriverRegistry holding live driver state
        engine: MatchingEngine answering nearest-driver queries
        settings: Service settings (loaded from the environment when omitted)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Driver Matching API",
        version=__version__,
        description="Register drivers, stream their locations and find the closest ones",
    )

    # Set core dependencies immediately (not in lifespan) so they're available for testing
    app.state.driver_registry = registry
    app.state.matching_engine = engine
    app.state.settings = settings

    origins = settings.cors.origins.split(",")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(drivers.router, prefix="/api/drivers", tags=["drivers"])
    app.include_router(rides.router, prefix="/api/rides", tags=["rides"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint for monitoring."""
        return {"status": "healthy"}

    @app.get("/metrics", include_in_schema=False)
    async def prometheus_metrics() -> Response:
        return Response(content=generate_metrics(), media_type=CONTENT_TYPE_LATEST)

    logger.debug("API created with CORS origins %s", origins)
    return app
