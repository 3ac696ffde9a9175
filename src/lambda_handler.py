"""AWS Lambda entry point serving the dashboard behind API Gateway.

The FastAPI application is created once per Lambda container and wrapped
with the Mangum ASGI adapter; warm invocations reuse it.
"""

import logging
import os
from typing import Any

from fastapi import FastAPI
from mangum import Mangum

from foodie_dashboard.handlers.page_handler import create_app
from foodie_dashboard.observability import configure_logging
from foodie_dashboard.services.content_client import ContentClient
from foodie_dashboard.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

_fastapi_app: FastAPI | None = None
_mangum_handler: Mangum | None = None


def get_fastapi_app() -> FastAPI:
    """Create or retrieve the cached FastAPI application.

    Returns:
        Dashboard application shared by warm invocations
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = create_app(
        content_client=ContentClient.from_environment(),
        dashboard_service=DashboardService.from_environment(),
    )
    logger.info("Dashboard application created for this container")
    return _fastapi_app


def get_mangum_handler() -> Mangum:
    """Create or retrieve the cached Mangum adapter around the application."""
    global _mangum_handler

    if _mangum_handler is None:
        _mangum_handler = Mangum(get_fastapi_app(), lifespan="off")
    return _mangum_handler


def initialize_lambda_environment() -> None:
    """Configure logging once during the Lambda cold start."""
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    logger.info("Cold start: logging configured")


if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()
    get_mangum_handler()


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle an API Gateway request.

    Args:
        event: API Gateway (REST or HTTP API) event payload
        context: Lambda context (its request id is logged)

    Returns:
        API Gateway response dict with statusCode, headers and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        result: dict[str, Any] = get_mangum_handler()(event, context)
        return result
    except Exception as e:
        logger.exception(f"Request failed outside the dashboard application: {e}")
        return {
            "statusCode": 500,
            "headers": {"content-type": "text/plain"},
            "body": "Internal server error",
        }
