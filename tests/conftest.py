"""Shared pytest fixtures and configuration for all tests."""

import os

# Entry point modules build the real application on import unless in test mode
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import UTC, date, datetime  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402

from foodie_dashboard.models.content_models import Order  # noqa: E402


def _build_order(
    order_id: str,
    created_at: str = "2024-01-15T10:30:00.000Z",
    **metadata: Any,
) -> Order:
    """Build an Order the way the content store returns it."""
    return Order.model_validate(
        {
            "id": order_id,
            "title": f"Order {order_id}",
            "type": "orders",
            "created_at": created_at,
            "metadata": metadata,
        }
    )


@pytest.fixture
def make_order():
    """Fixture providing a factory for orders with the given metadata."""
    return _build_order


@pytest.fixture
def today() -> date:
    """Fixture providing the reference date used by aggregation tests."""
    return date(2024, 1, 15)


@pytest.fixture
def request_time() -> datetime:
    """Fixture providing a request timestamp on the reference date."""
    return datetime(2024, 1, 15, 18, 0, tzinfo=UTC)


@pytest.fixture
def mock_restaurant() -> dict:
    """Fixture providing a restaurant object fetched with depth 1."""
    return {
        "id": "rest_1",
        "slug": "burger-barn",
        "title": "Burger Barn",
        "type": "restaurants",
        "created_at": "2023-11-02T09:00:00.000Z",
        "metadata": {
            "cover_image": {
                "url": "https://cdn.example.com/cover.jpg",
                "imgix_url": "https://imgix.example.com/cover.jpg",
            },
            "short_description": "Smash burgers and shakes",
            "city": "Austin",
            "country": "USA",
            "cuisine_types": ["American", "Burgers", "Fast Food", "Desserts"],
            "rating": 4.6,
            "delivery_time": "25-35 min",
            "status": "Active",
        },
    }


@pytest.fixture
def mock_menu_item(mock_restaurant: dict) -> dict:
    """Fixture providing a menu item with expanded references."""
    return {
        "id": "item_1",
        "slug": "classic-burger",
        "title": "Classic Burger",
        "type": "menu-items",
        "created_at": "2023-11-03T09:00:00.000Z",
        "metadata": {
            "description": "Double patty with cheese",
            "price": "12.99",
            "discounted_price": "10.99",
            "tags": ["beef", "bestseller"],
            "category": {"id": "cat_1", "title": "Burgers", "type": "menu-categories"},
            "restaurant": mock_restaurant,
        },
    }


@pytest.fixture
def scenario_orders() -> list[dict]:
    """Fixture providing three orders: two from the reference day, one from the day before."""
    return [
        {
            "id": "order_1",
            "title": "Order O1",
            "type": "orders",
            "created_at": "2024-01-15T09:00:00.000Z",
            "metadata": {
                "order_number": "O1",
                "total": "12.50",
                "payment_status": "Paid",
                "order_status": "Delivered",
            },
        },
        {
            "id": "order_2",
            "title": "Order O2",
            "type": "orders",
            "created_at": "2024-01-15T12:00:00.000Z",
            "metadata": {
                "order_number": "O2",
                "total": "8.00",
                "payment_status": "Not Paid",
                "order_status": "Preparing",
            },
        },
        {
            "id": "order_3",
            "title": "Order O3",
            "type": "orders",
            "created_at": "2024-01-14T20:00:00.000Z",
            "metadata": {
                "order_number": "O3",
                "total": "20.00",
                "payment_status": "Paid",
                "order_status": "Pending",
            },
        },
    ]
