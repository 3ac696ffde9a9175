"""Request-scoped data loading for the dashboard pages."""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from foodie_dashboard.models.content_models import (
    MENU_ITEMS,
    ORDERS,
    RESTAURANTS,
    ContentObject,
    MenuItem,
    Order,
    Restaurant,
    normalize_objects,
)
from foodie_dashboard.observability import traced
from foodie_dashboard.observability.metrics import record_empty_fallback
from foodie_dashboard.services.aggregation import (
    RECENT_ORDERS_LIMIT,
    DashboardStats,
    compute_dashboard_stats,
    recent_orders,
    sort_orders_newest_first,
)
from foodie_dashboard.services.content_client import ContentClient, ContentNotFoundError

logger = logging.getLogger(__name__)

# Projections requested from the content store
COUNT_PROPS = ("id",)
STATS_ORDER_PROPS = ("id", "metadata", "created_at")
ORDER_LIST_PROPS = ("id", "title", "metadata", "created_at")
LISTING_PROPS = ("id", "title", "slug", "metadata")


@dataclass(frozen=True)
class RequestContext:
    """Everything a single page render reads from.

    A context is created for each incoming request and discarded with it:
    data is fetched fresh for every render and nothing is cached between
    requests.

    Attributes:
        client: Client used for every fetch of this request
        now: Time the request was received, in UTC
    """

    client: ContentClient
    now: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def today(self) -> date:
        """UTC calendar date of the request."""
        return self.now.astimezone(UTC).date()


@dataclass(frozen=True)
class Dashboard:
    """Data rendered on the dashboard root page."""

    stats: DashboardStats
    recent_orders: list[Order]


class DashboardService:
    """Service that loads and aggregates the records behind each page.

    Independent fetches of one page are issued concurrently. A fetch that
    the content store answers with "not found" yields an empty list; any
    other failure propagates to the caller.
    """

    def __init__(self, recent_orders_limit: int = RECENT_ORDERS_LIMIT) -> None:
        """Initialize the DashboardService.

        Args:
            recent_orders_limit: Number of orders shown in the recent orders table
        """
        self.recent_orders_limit = recent_orders_limit

    @classmethod
    def from_environment(cls) -> "DashboardService":
        """Create a service configured by ``RECENT_ORDERS_LIMIT`` (default 5)."""
        return cls(recent_orders_limit=int(os.getenv("RECENT_ORDERS_LIMIT", str(RECENT_ORDERS_LIMIT))))

    async def _fetch_or_empty(
        self,
        ctx: RequestContext,
        model: type[ContentObject],
        object_type: str,
        props: tuple[str, ...],
        depth: int = 0,
    ) -> list:
        try:
            object_list = await ctx.client.find_objects(object_type, props, depth=depth)
        except ContentNotFoundError:
            logger.info(f"No '{object_type}' objects in the content store, using an empty list")
            record_empty_fallback(object_type)
            return []
        return normalize_objects(object_list, model)

    @traced("dashboard.stats")
    async def get_dashboard_stats(self, ctx: RequestContext) -> DashboardStats:
        """Compute the dashboard's headline numbers.

        Restaurants, orders and menu items are fetched concurrently and all
        three must complete before the stats are computed.

        Args:
            ctx: Context of the current request

        Returns:
            DashboardStats for the current content
        """
        restaurants, orders, menu_items = await asyncio.gather(
            self._fetch_or_empty(ctx, Restaurant, RESTAURANTS, COUNT_PROPS),
            self._fetch_or_empty(ctx, Order, ORDERS, STATS_ORDER_PROPS),
            self._fetch_or_empty(ctx, MenuItem, MENU_ITEMS, COUNT_PROPS),
        )
        stats = compute_dashboard_stats(restaurants, orders, menu_items, ctx.today)
        logger.debug(f"Computed dashboard stats: {stats}")
        return stats

    @traced("dashboard.orders")
    async def get_orders(self, ctx: RequestContext) -> list[Order]:
        """Get every order with its restaurant expanded, newest first."""
        orders = await self._fetch_or_empty(ctx, Order, ORDERS, ORDER_LIST_PROPS, depth=1)
        return sort_orders_newest_first(orders)

    @traced("dashboard.recent_orders")
    async def get_recent_orders(self, ctx: RequestContext, limit: int | None = None) -> list[Order]:
        """Get the most recent orders for the dashboard table (service limit unless given)."""
        orders = await self._fetch_or_empty(ctx, Order, ORDERS, ORDER_LIST_PROPS, depth=1)
        return recent_orders(orders, self.recent_orders_limit if limit is None else limit)

    @traced("dashboard.restaurants")
    async def get_restaurants(self, ctx: RequestContext) -> list[Restaurant]:
        """Get every restaurant in fetch order."""
        return await self._fetch_or_empty(ctx, Restaurant, RESTAURANTS, LISTING_PROPS, depth=1)

    @traced("dashboard.menu_items")
    async def get_menu_items(self, ctx: RequestContext) -> list[MenuItem]:
        """Get every menu item with its category and restaurant expanded."""
        return await self._fetch_or_empty(ctx, MenuItem, MENU_ITEMS, LISTING_PROPS, depth=1)

    @traced("dashboard.load")
    async def get_dashboard(self, ctx: RequestContext) -> Dashboard:
        """Load the stats and recent orders shown on the dashboard root page.

        Args:
            ctx: Context of the current request

        Returns:
            Dashboard with stats and recent orders
        """
        stats, recent = await asyncio.gather(
            self.get_dashboard_stats(ctx),
            self.get_recent_orders(ctx),
        )
        return Dashboard(stats=stats, recent_orders=recent)
