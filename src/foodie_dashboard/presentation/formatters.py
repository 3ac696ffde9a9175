"""Display helpers applying per-field fallbacks where values are rendered.

Records are kept exactly as the content store returned them; the defaults
below ("N/A", "0.00", "Pending", ...) only exist on the page.
"""

from foodie_dashboard.models.content_models import (
    ContentObject,
    MenuItem,
    Order,
    OrderStatus,
    PaymentStatus,
    Restaurant,
    RestaurantStatus,
)
from foodie_dashboard.services.aggregation import is_available, parse_timestamp

NOT_AVAILABLE = "N/A"
ZERO_AMOUNT = "0.00"
MAX_BADGES = 3

ORDER_STATUS_BADGES = {
    OrderStatus.DELIVERED: "bg-green-100 text-green-800",
    OrderStatus.CANCELLED: "bg-red-100 text-red-800",
    OrderStatus.OUT_FOR_DELIVERY: "bg-blue-100 text-blue-800",
    OrderStatus.READY: "bg-purple-100 text-purple-800",
    OrderStatus.PREPARING: "bg-yellow-100 text-yellow-800",
}
DEFAULT_ORDER_BADGE = "bg-gray-100 text-gray-800"


def reference_title(reference: ContentObject | str | None) -> str:
    """Title of an expanded reference; bare ids and missing references show N/A."""
    if isinstance(reference, ContentObject) and reference.title:
        return reference.title
    return NOT_AVAILABLE


def order_number(order: Order) -> str:
    return order.metadata.order_number or order.title


def customer_name(order: Order) -> str:
    return order.metadata.customer_name or NOT_AVAILABLE


def customer_phone(order: Order) -> str:
    return order.metadata.customer_phone or NOT_AVAILABLE


def order_total(order: Order) -> str:
    return order.metadata.total or ZERO_AMOUNT


def order_status(order: Order) -> str:
    status = order.metadata.order_status
    return status.value if status is not None else OrderStatus.PENDING.value


def payment_status(order: Order) -> str:
    status = order.metadata.payment_status
    return status.value if status is not None else PaymentStatus.NOT_PAID.value


def order_item_count(order: Order) -> int:
    return len(order.metadata.order_items or [])


def order_status_badge(order: Order) -> str:
    """CSS classes for an order status badge."""
    status = order.metadata.order_status
    if status is None:
        return DEFAULT_ORDER_BADGE
    return ORDER_STATUS_BADGES.get(status, DEFAULT_ORDER_BADGE)


def payment_status_badge(order: Order) -> str:
    if order.metadata.payment_status == PaymentStatus.PAID:
        return "bg-green-100 text-green-800"
    return "bg-red-100 text-red-800"


def order_created(order: Order) -> str:
    """Creation time as "Jan 5, 2024, 02:30 PM" (UTC); empty when unknown."""
    created = parse_timestamp(order.created_at)
    if created is None:
        return ""
    return f"{created:%b} {created.day}, {created:%Y, %I:%M %p}"


def restaurant_description(restaurant: Restaurant) -> str:
    return restaurant.metadata.short_description or "No description"


def restaurant_is_active(restaurant: Restaurant) -> bool:
    return restaurant.metadata.status == RestaurantStatus.ACTIVE


def restaurant_location(restaurant: Restaurant) -> str:
    """City, followed by the country when known; empty without a city."""
    city = restaurant.metadata.city
    if not city:
        return ""
    country = restaurant.metadata.country
    return f"{city}, {country}" if country else city


def restaurant_rating(restaurant: Restaurant) -> str | None:
    rating = restaurant.metadata.rating
    return f"{rating:.1f}" if rating is not None else None


def cuisine_badges(restaurant: Restaurant) -> list[str]:
    return (restaurant.metadata.cuisine_types or [])[:MAX_BADGES]


def menu_item_tags(menu_item: MenuItem) -> list[str]:
    return (menu_item.metadata.tags or [])[:MAX_BADGES]


def menu_item_price(menu_item: MenuItem) -> str:
    return menu_item.metadata.price or ZERO_AMOUNT


def menu_item_available(menu_item: MenuItem) -> bool:
    return is_available(menu_item)


def image_url(imgix_url: str, width: int, height: int) -> str:
    """Cropped, compressed rendition of an image served by the image CDN."""
    return f"{imgix_url}?w={width}&h={height}&fit=crop&auto=format,compress"


TEMPLATE_FILTERS = {
    "reference_title": reference_title,
    "order_number": order_number,
    "customer_name": customer_name,
    "customer_phone": customer_phone,
    "order_total": order_total,
    "order_status": order_status,
    "payment_status": payment_status,
    "order_item_count": order_item_count,
    "order_status_badge": order_status_badge,
    "payment_status_badge": payment_status_badge,
    "order_created": order_created,
    "restaurant_description": restaurant_description,
    "restaurant_location": restaurant_location,
    "restaurant_rating": restaurant_rating,
    "cuisine_badges": cuisine_badges,
    "menu_item_tags": menu_item_tags,
    "menu_item_price": menu_item_price,
    "image_url": image_url,
}

TEMPLATE_TESTS = {
    "active_restaurant": restaurant_is_active,
    "available_item": menu_item_available,
}
