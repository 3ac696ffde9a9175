"""Dashboard metrics and derived order views.

Every function here is pure: it works on record sets that were fetched for
the current request and takes the reference date as an argument, so the
same inputs always produce the same stats.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from foodie_dashboard.models.content_models import (
    MenuItem,
    Order,
    OrderStatus,
    PaymentStatus,
)

ACTIVE_ORDER_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.PREPARING,
        OrderStatus.READY,
        OrderStatus.OUT_FOR_DELIVERY,
    }
)

RECENT_ORDERS_LIMIT = 5

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Leading numeric prefix, the part of "12.50 USD" a lenient parser keeps
_AMOUNT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class DashboardStats:
    """Headline numbers shown on the dashboard.

    Attributes:
        total_restaurants: Number of restaurants in the content store
        active_orders: Number of orders still in progress
        total_menu_items: Number of menu items in the content store
        today_revenue: Revenue of today's paid orders, two decimals
    """

    total_restaurants: int
    active_orders: int
    total_menu_items: int
    today_revenue: str

    @classmethod
    def empty(cls) -> "DashboardStats":
        return cls(total_restaurants=0, active_orders=0, total_menu_items=0, today_revenue="0.00")


def parse_amount(value: str | None) -> Decimal:
    """Parse a decimal-string monetary field.

    Missing, empty and unparseable values count as zero. Trailing text after
    a numeric prefix is ignored.

    Args:
        value: Amount as stored in the content store (e.g., "12.50")

    Returns:
        The amount as a Decimal
    """
    if value is None:
        return ZERO

    match = _AMOUNT_PREFIX.match(str(value))
    if match is None:
        return ZERO

    try:
        amount = Decimal(match.group(1))
    except InvalidOperation:
        return ZERO

    return amount if amount.is_finite() else ZERO


def format_amount(amount: Decimal) -> str:
    """Format an amount with exactly two decimal places, rounding half up."""
    return str(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp into an aware UTC datetime.

    Naive timestamps are taken to be UTC.

    Returns:
        The timestamp, or None if it is missing or malformed
    """
    if not value:
        return None

    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def count_records(records: Sequence[Any]) -> int:
    return len(records)


def is_active_order(order: Order) -> bool:
    """An order is active while it is pending, preparing, ready or out for delivery."""
    status = order.metadata.order_status
    return status is not None and status in ACTIVE_ORDER_STATUSES


def count_active_orders(orders: Iterable[Order]) -> int:
    return sum(1 for order in orders if is_active_order(order))


def is_paid(order: Order) -> bool:
    return order.metadata.payment_status == PaymentStatus.PAID


def is_created_on(order: Order, day: date) -> bool:
    """Check whether an order's creation timestamp falls on a UTC calendar day."""
    created = parse_timestamp(order.created_at)
    return created is not None and created.date() == day


def today_revenue(orders: Iterable[Order], today: date) -> str:
    """Sum the totals of paid orders created on ``today``.

    Args:
        orders: Orders to aggregate
        today: Reference UTC calendar date

    Returns:
        Revenue formatted with two decimal places (e.g., "12.50")
    """
    revenue = sum(
        (parse_amount(order.metadata.total) for order in orders if is_created_on(order, today) and is_paid(order)),
        ZERO,
    )
    return format_amount(revenue)


def sort_orders_newest_first(orders: Iterable[Order]) -> list[Order]:
    """Sort orders by creation timestamp, newest first.

    The sort is stable: orders with equal timestamps keep their fetch order.
    Orders whose timestamp cannot be parsed are placed last.
    """

    def sort_key(order: Order) -> tuple[bool, float]:
        created = parse_timestamp(order.created_at)
        if created is None:
            return (True, 0.0)
        return (False, -created.timestamp())

    return sorted(orders, key=sort_key)


def recent_orders(orders: Iterable[Order], limit: int = RECENT_ORDERS_LIMIT) -> list[Order]:
    """Return the ``limit`` most recent orders, newest first."""
    return sort_orders_newest_first(orders)[:limit]


def is_available(menu_item: MenuItem) -> bool:
    """Menu items are available unless explicitly marked otherwise."""
    return menu_item.metadata.available is not False


def compute_dashboard_stats(
    restaurants: Sequence[Any],
    orders: Sequence[Order],
    menu_items: Sequence[Any],
    today: date,
) -> DashboardStats:
    """Compute the dashboard's headline numbers from freshly fetched records.

    Args:
        restaurants: All restaurants
        orders: All orders (metadata and creation timestamp required)
        menu_items: All menu items
        today: Reference UTC calendar date for the revenue figure

    Returns:
        DashboardStats for the given records
    """
    return DashboardStats(
        total_restaurants=count_records(restaurants),
        active_orders=count_active_orders(orders),
        total_menu_items=count_records(menu_items),
        today_revenue=today_revenue(orders, today),
    )
