"""FastAPI application serving the dashboard pages."""

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from foodie_dashboard.observability.metrics import record_page_render
from foodie_dashboard.presentation.formatters import TEMPLATE_FILTERS, TEMPLATE_TESTS
from foodie_dashboard.services.content_client import ContentClient
from foodie_dashboard.services.dashboard_service import DashboardService, RequestContext

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

NAV_LINKS = [
    ("dashboard", "/", "Dashboard"),
    ("restaurants", "/restaurants", "Restaurants"),
    ("orders", "/orders", "Orders"),
    ("menu_items", "/menu-items", "Menu Items"),
]


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


def create_templates() -> Jinja2Templates:
    """Create the template environment with the display filters registered."""
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters.update(TEMPLATE_FILTERS)
    templates.env.tests.update(TEMPLATE_TESTS)
    templates.env.globals["nav_links"] = NAV_LINKS
    return templates


def create_app(
    content_client: ContentClient,
    dashboard_service: DashboardService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        content_client: Client used to read the content store
        dashboard_service: Service loading page data (a default one is created if omitted)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Foodie Dashboard",
        description="Admin dashboard for restaurants, menu items and orders",
        version="1.0.0",
    )

    app.state.content_client = content_client
    app.state.dashboard_service = dashboard_service or DashboardService()
    templates = create_templates()

    def get_request_context(request: Request) -> RequestContext:
        """Dependency creating a fresh context for every request."""
        return RequestContext(client=request.app.state.content_client)

    async def render_page(
        request: Request,
        page: str,
        template_name: str,
        load: Callable[[], Awaitable[dict[str, Any]]],
    ) -> HTMLResponse:
        """Render a page, falling back to the error page when loading fails."""
        try:
            context = await load()
        except Exception as e:
            logger.exception(f"Failed to load data for page '{page}': {e}")
            record_page_render(page, success=False)
            return templates.TemplateResponse(
                request,
                "error.html",
                {"active_page": page},
                status_code=500,
            )

        record_page_render(page, success=True)
        return templates.TemplateResponse(
            request,
            template_name,
            {"active_page": page, **context},
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    @app.get("/", response_class=HTMLResponse, tags=["Pages"])
    async def dashboard_page(
        request: Request,
        ctx: RequestContext = Depends(get_request_context),
    ) -> HTMLResponse:
        """Dashboard with headline stats and the most recent orders."""

        async def load() -> dict[str, Any]:
            dashboard = await app.state.dashboard_service.get_dashboard(ctx)
            return {"stats": dashboard.stats, "recent_orders": dashboard.recent_orders}

        return await render_page(request, "dashboard", "dashboard.html", load)

    @app.get("/restaurants", response_class=HTMLResponse, tags=["Pages"])
    async def restaurants_page(
        request: Request,
        ctx: RequestContext = Depends(get_request_context),
    ) -> HTMLResponse:
        """All restaurants as cards."""

        async def load() -> dict[str, Any]:
            return {"restaurants": await app.state.dashboard_service.get_restaurants(ctx)}

        return await render_page(request, "restaurants", "restaurants.html", load)

    @app.get("/orders", response_class=HTMLResponse, tags=["Pages"])
    async def orders_page(
        request: Request,
        ctx: RequestContext = Depends(get_request_context),
    ) -> HTMLResponse:
        """All orders, newest first."""

        async def load() -> dict[str, Any]:
            return {"orders": await app.state.dashboard_service.get_orders(ctx)}

        return await render_page(request, "orders", "orders.html", load)

    @app.get("/menu-items", response_class=HTMLResponse, tags=["Pages"])
    async def menu_items_page(
        request: Request,
        ctx: RequestContext = Depends(get_request_context),
    ) -> HTMLResponse:
        """All menu items as cards."""

        async def load() -> dict[str, Any]:
            return {"menu_items": await app.state.dashboard_service.get_menu_items(ctx)}

        return await render_page(request, "menu_items", "menu_items.html", load)

    return app
