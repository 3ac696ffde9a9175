"""Unit tests for DashboardService."""

import os
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from foodie_dashboard.models.content_models import MenuItem, ObjectList, Order, Restaurant
from foodie_dashboard.services.aggregation import DashboardStats
from foodie_dashboard.services.content_client import ContentClient, ContentNotFoundError
from foodie_dashboard.services.dashboard_service import DashboardService, RequestContext


def _object_list(objects: list[dict]) -> ObjectList:
    return ObjectList(objects=objects, total=len(objects), limit=1000, skip=0)


@pytest.mark.unit
class TestRequestContext:
    """Test suite for RequestContext."""

    def test_today_is_utc_date_of_request(self) -> None:
        """Test that the request date is taken in UTC."""
        client = MagicMock(spec=ContentClient)
        ctx = RequestContext(client=client, now=datetime.fromisoformat("2024-01-15T21:00:00-05:00"))

        assert ctx.today.isoformat() == "2024-01-16"

    def test_defaults_to_current_time(self) -> None:
        """Test that a context without a timestamp uses the current time."""
        before = datetime.now(UTC)
        ctx = RequestContext(client=MagicMock(spec=ContentClient))

        assert ctx.now >= before
        assert ctx.now.tzinfo is not None


@pytest.mark.unit
class TestDashboardServiceFromEnvironment:
    """Tests for DashboardService.from_environment."""

    @patch.dict(os.environ, {"RECENT_ORDERS_LIMIT": "3"}, clear=True)
    def test_reads_recent_orders_limit(self) -> None:
        """Test that the recent orders limit comes from the environment."""
        assert DashboardService.from_environment().recent_orders_limit == 3

    @patch.dict(os.environ, {}, clear=True)
    def test_default_recent_orders_limit(self) -> None:
        """Test that five recent orders are shown by default."""
        assert DashboardService.from_environment().recent_orders_limit == 5


@pytest.mark.unit
class TestDashboardService:
    """Test suite for DashboardService."""

    @pytest.fixture
    def mock_client(self) -> ContentClient:
        """Create a mock ContentClient."""
        client = MagicMock(spec=ContentClient)
        client.find_objects = AsyncMock()
        return client

    @pytest.fixture
    def ctx(self, mock_client: ContentClient, request_time: datetime) -> RequestContext:
        """Create a request context on the reference date."""
        return RequestContext(client=mock_client, now=request_time)

    @pytest.fixture
    def service(self) -> DashboardService:
        """Create a DashboardService."""
        return DashboardService()

    @staticmethod
    def _by_type(responses: dict[str, object]):
        async def find_objects(object_type: str, props, depth: int = 0) -> ObjectList:
            response = responses[object_type]
            if isinstance(response, Exception):
                raise response
            return response  # type: ignore[return-value]

        return find_objects

    @pytest.mark.asyncio
    async def test_get_dashboard_stats(
        self,
        service: DashboardService,
        ctx: RequestContext,
        mock_client: MagicMock,
        scenario_orders: list[dict],
    ) -> None:
        """Test stats computed from concurrently fetched records."""
        mock_client.find_objects.side_effect = self._by_type(
            {
                "restaurants": _object_list([{"id": "r1"}, {"id": "r2"}, {"id": "r3"}]),
                "orders": _object_list(scenario_orders),
                "menu-items": _object_list([{"id": "m1"}]),
            }
        )

        stats = await service.get_dashboard_stats(ctx)

        assert stats == DashboardStats(
            total_restaurants=3,
            active_orders=2,
            total_menu_items=1,
            today_revenue="12.50",
        )

    @pytest.mark.asyncio
    async def test_get_dashboard_stats_projections(
        self, service: DashboardService, ctx: RequestContext, mock_client: MagicMock
    ) -> None:
        """Test that counts use an id projection and orders bring metadata and timestamps."""
        mock_client.find_objects.return_value = _object_list([])

        await service.get_dashboard_stats(ctx)

        calls = {c.args[0]: c for c in mock_client.find_objects.call_args_list}
        assert calls["restaurants"].args[1] == ("id",)
        assert calls["menu-items"].args[1] == ("id",)
        assert calls["orders"].args[1] == ("id", "metadata", "created_at")
        assert all(c.kwargs["depth"] == 0 for c in calls.values())

    @pytest.mark.asyncio
    async def test_get_dashboard_stats_all_not_found(
        self, service: DashboardService, ctx: RequestContext, mock_client: MagicMock
    ) -> None:
        """Test that not-found for every type degrades to the empty stats."""
        mock_client.find_objects.side_effect = lambda object_type, props, depth=0: _raise(
            ContentNotFoundError(object_type)
        )

        stats = await service.get_dashboard_stats(ctx)

        assert stats == DashboardStats.empty()

    @pytest.mark.asyncio
    async def test_get_dashboard_stats_partial_not_found(
        self,
        service: DashboardService,
        ctx: RequestContext,
        mock_client: MagicMock,
        scenario_orders: list[dict],
    ) -> None:
        """Test that a not-found type only zeroes its own count."""
        mock_client.find_objects.side_effect = self._by_type(
            {
                "restaurants": _object_list([{"id": "r1"}]),
                "orders": _object_list(scenario_orders),
                "menu-items": ContentNotFoundError("menu-items"),
            }
        )

        stats = await service.get_dashboard_stats(ctx)

        assert stats.total_restaurants == 1
        assert stats.active_orders == 2
        assert stats.total_menu_items == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "odd_metadata,revenue",
        [
            ({"order_status": ""}, "12.50"),
            ({"payment_status": "", "total": "3.00"}, "12.50"),
            ({"payment_status": "Paid", "total": 5.0, "order_status": "Lost"}, "17.50"),
            (None, "12.50"),
        ],
    )
    async def test_get_dashboard_stats_tolerates_odd_orders(
        self,
        service: DashboardService,
        ctx: RequestContext,
        mock_client: MagicMock,
        odd_metadata: dict | None,
        revenue: str,
    ) -> None:
        """Test that one unusual order is counted by its readable fields without failing the stats."""
        good_order = {
            "id": "good",
            "created_at": "2024-01-15T09:00:00.000Z",
            "metadata": {"order_status": "Preparing", "payment_status": "Paid", "total": "12.50"},
        }
        odd_order = {"id": "odd", "created_at": "2024-01-15T11:00:00.000Z", "metadata": odd_metadata}
        mock_client.find_objects.side_effect = self._by_type(
            {
                "restaurants": _object_list([{"id": "r1"}]),
                "orders": _object_list([good_order, odd_order]),
                "menu-items": _object_list([]),
            }
        )

        stats = await service.get_dashboard_stats(ctx)

        assert stats.active_orders == 1
        assert stats.today_revenue == revenue

    @pytest.mark.asyncio
    async def test_get_dashboard_stats_other_errors_propagate(
        self, service: DashboardService, ctx: RequestContext, mock_client: MagicMock
    ) -> None:
        """Test that failures other than not-found reach the caller."""
        error = httpx.HTTPStatusError("Unauthorized", request=MagicMock(), response=MagicMock())
        mock_client.find_objects.side_effect = self._by_type(
            {
                "restaurants": _object_list([]),
                "orders": error,
                "menu-items": _object_list([]),
            }
        )

        with pytest.raises(httpx.HTTPStatusError):
            await service.get_dashboard_stats(ctx)

    @pytest.mark.asyncio
    async def test_get_orders_newest_first(
        self,
        service: DashboardService,
        ctx: RequestContext,
        mock_client: MagicMock,
        scenario_orders: list[dict],
    ) -> None:
        """Test that the order list is sorted newest first and fetched with depth 1."""
        mock_client.find_objects.return_value = _object_list(scenario_orders)

        orders = await service.get_orders(ctx)

        assert [o.id for o in orders] == ["order_2", "order_1", "order_3"]
        assert all(isinstance(o, Order) for o in orders)
        mock_client.find_objects.assert_awaited_once_with(
            "orders", ("id", "title", "metadata", "created_at"), depth=1
        )

    @pytest.mark.asyncio
    async def test_get_orders_not_found(
        self, service: DashboardService, ctx: RequestContext, mock_client: MagicMock
    ) -> None:
        """Test that no orders in the store yields an empty list."""
        mock_client.find_objects.side_effect = ContentNotFoundError("orders")

        assert await service.get_orders(ctx) == []

    @pytest.mark.asyncio
    async def test_get_recent_orders_limit(
        self, ctx: RequestContext, mock_client: MagicMock
    ) -> None:
        """Test that recent orders are capped at the configured limit."""
        mock_client.find_objects.return_value = _object_list(
            [{"id": f"o{d}", "created_at": f"2024-01-{d:02d}T00:00:00.000Z"} for d in range(1, 11)]
        )

        recent = await DashboardService().get_recent_orders(ctx)
        top_two = await DashboardService(recent_orders_limit=2).get_recent_orders(ctx)

        assert [o.id for o in recent] == ["o10", "o9", "o8", "o7", "o6"]
        assert [o.id for o in top_two] == ["o10", "o9"]
        assert [o.id for o in await DashboardService().get_recent_orders(ctx, limit=1)] == ["o10"]

    @pytest.mark.asyncio
    async def test_get_recent_orders_span(
        self, service: DashboardService, ctx: RequestContext, mock_client: MagicMock
    ) -> None:
        """Test that recent orders are loaded inside their own span."""
        mock_client.find_objects.return_value = _object_list([])

        with patch("foodie_dashboard.observability.decorators._call_span") as mock_span:
            await service.get_recent_orders(ctx)

        assert [c.args[1] for c in mock_span.call_args_list] == ["dashboard.recent_orders"]

    @pytest.mark.asyncio
    async def test_get_restaurants(
        self,
        service: DashboardService,
        ctx: RequestContext,
        mock_client: MagicMock,
        mock_restaurant: dict,
    ) -> None:
        """Test fetching restaurants in fetch order."""
        mock_client.find_objects.return_value = _object_list([mock_restaurant, {"id": "rest_2"}])

        restaurants = await service.get_restaurants(ctx)

        assert [r.id for r in restaurants] == ["rest_1", "rest_2"]
        assert isinstance(restaurants[0], Restaurant)
        mock_client.find_objects.assert_awaited_once_with(
            "restaurants", ("id", "title", "slug", "metadata"), depth=1
        )

    @pytest.mark.asyncio
    async def test_get_menu_items_not_found(
        self, service: DashboardService, ctx: RequestContext, mock_client: MagicMock
    ) -> None:
        """Test that no menu items in the store yields an empty list."""
        mock_client.find_objects.side_effect = ContentNotFoundError("menu-items")

        assert await service.get_menu_items(ctx) == []

    @pytest.mark.asyncio
    async def test_get_menu_items(
        self,
        service: DashboardService,
        ctx: RequestContext,
        mock_client: MagicMock,
        mock_menu_item: dict,
    ) -> None:
        """Test fetching menu items with expanded references."""
        mock_client.find_objects.return_value = _object_list([mock_menu_item])

        items = await service.get_menu_items(ctx)

        assert len(items) == 1
        assert isinstance(items[0], MenuItem)
        assert isinstance(items[0].metadata.restaurant, Restaurant)

    @pytest.mark.asyncio
    async def test_get_dashboard(
        self,
        service: DashboardService,
        ctx: RequestContext,
        mock_client: MagicMock,
        scenario_orders: list[dict],
    ) -> None:
        """Test loading stats and recent orders together."""
        mock_client.find_objects.side_effect = self._by_type(
            {
                "restaurants": _object_list([{"id": "r1"}]),
                "orders": _object_list(scenario_orders),
                "menu-items": _object_list([]),
            }
        )

        dashboard = await service.get_dashboard(ctx)

        assert dashboard.stats.active_orders == 2
        assert dashboard.stats.today_revenue == "12.50"
        assert [o.id for o in dashboard.recent_orders] == ["order_2", "order_1", "order_3"]


def _raise(error: Exception):
    raise error
