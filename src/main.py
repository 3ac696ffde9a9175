"""Entry point for running the Foodie dashboard under uvicorn.

``app`` is the ASGI application served in containers and during local
development; ``python src/main.py`` starts a reloading dev server.
"""

import logging
import os

from fastapi import FastAPI

from foodie_dashboard.handlers.page_handler import create_app
from foodie_dashboard.observability import configure_logging, setup_observability
from foodie_dashboard.services.content_client import ContentClient
from foodie_dashboard.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Build the dashboard application from environment configuration.

    Logging is configured first, then the content client and dashboard
    service are created and handed to the page routes. OpenTelemetry is
    only set up when ``ENABLE_TELEMETRY`` is ``true``.

    Returns:
        FastAPI application serving the dashboard pages

    Raises:
        ValueError: If the content store bucket or read key is not configured
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing Foodie dashboard...")

    content_client = ContentClient.from_environment()
    dashboard_service = DashboardService.from_environment()

    app = create_app(content_client=content_client, dashboard_service=dashboard_service)

    if os.getenv("ENABLE_TELEMETRY", "false").lower() == "true":
        setup_observability(app)
    else:
        logger.info("Telemetry export disabled")

    logger.info("Foodie dashboard initialized successfully")
    return app


# Skip building the real application during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
