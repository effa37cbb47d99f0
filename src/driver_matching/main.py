"""
Driver Matching Service - Entry Point

Builds the driver registry and matching engine in memory and serves them
through the FastAPI app. Driver state lives only as long as the process.
"""

import logging

import uvicorn

from driver_matching.api.app import create_app
from driver_matching.matching.driver_registry import DriverRegistry
from driver_matching.matching.matching_engine import MatchingEngine
from driver_matching.service_logging import setup_logging
from driver_matching.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    setup_logging(
        level=settings.service.log_level,
        json_output=settings.service.log_format == "json",
        environment=settings.service.environment,
    )

    registry = DriverRegistry(index_precision=settings.matching.index_precision)
    engine = MatchingEngine(registry, settings.matching)
    app = create_app(registry, engine, settings)

    logger.info(
        "Starting driver matching service on %s:%d (index precision %d, search ladder %s)",
        settings.service.host,
        settings.service.port,
        settings.matching.index_precision,
        settings.matching.search_precisions,
    )
    uvicorn.run(app, host=settings.service.host, port=settings.service.port, log_config=None)


if __name__ == "__main__":
    main()
