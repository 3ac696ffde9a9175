"""Content store data models.

These models represent the objects stored in the headless content store
(restaurants, menu categories, menu items and orders). The dashboard only
reads them: every field the store may omit is optional here, and display
fallbacks are applied where the values are rendered, not at parse time.
"""

import logging
from enum import Enum
from typing import Annotated, Any, Literal, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

logger = logging.getLogger(__name__)

RESTAURANTS = "restaurants"
MENU_CATEGORIES = "menu-categories"
MENU_ITEMS = "menu-items"
ORDERS = "orders"


class RestaurantStatus(str, Enum):
    """Lifecycle status of a restaurant."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


class OrderStatus(str, Enum):
    """Enumeration of order status values."""

    PENDING = "Pending"
    PREPARING = "Preparing"
    READY = "Ready"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(str, Enum):
    """Enumeration of payment status values."""

    PAID = "Paid"
    NOT_PAID = "Not Paid"


class ContentModel(BaseModel):
    """Base for all content store models: read-only, unknown keys ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")


def _lenient(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """Validate an optional field, dropping values it cannot hold to None.

    Used for weak references, enumerated statuses and bounded numbers, where
    one odd value must not cost the whole record.
    """
    try:
        return handler(value)
    except ValidationError as e:
        logger.debug(f"Ignoring invalid value {value!r}: {e.error_count()} error(s)")
        return None


def _numeric_to_string(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class ImageAsset(ContentModel):
    """Media reference served by the content store's image CDN."""

    url: str = ""
    imgix_url: str = ""


class ContentObject(ContentModel):
    """Fields shared by every object in the content store."""

    id: str = Field(..., description="Unique object identifier")
    slug: str = Field(default="", description="URL slug")
    title: str = Field(default="", description="Display title")
    content: str | None = Field(None, description="Rich text body")
    type: str = Field(default="", description="Object type slug")
    created_at: str = Field(default="", description="ISO 8601 creation timestamp")
    modified_at: str = Field(default="", description="ISO 8601 modification timestamp")

    @field_validator("slug", "title", "created_at", "modified_at", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("metadata", mode="before", check_fields=False)
    @classmethod
    def null_metadata_as_empty(cls, v: Any) -> Any:
        """Objects saved without metadata come back with ``metadata: null``."""
        return {} if v is None else v


class RestaurantMetadata(ContentModel):
    """Descriptive metadata of a restaurant."""

    cover_image: ImageAsset | None = None
    logo: ImageAsset | None = None
    short_description: str | None = None
    full_description: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    contact_phone: str | None = None
    opening_hours: str | None = None
    delivery_time: str | None = None
    cuisine_types: list[str] | None = None
    rating: float | None = Field(None, description="Average rating", ge=0)
    status: RestaurantStatus | None = None

    @field_validator("rating", "status", mode="wrap")
    @classmethod
    def validate_rating_and_status(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Drop a negative rating or an unknown status instead of rejecting the restaurant."""
        return _lenient(v, handler)


class Restaurant(ContentObject):
    """Restaurant listed on the platform."""

    type: Literal["restaurants"] = RESTAURANTS
    metadata: RestaurantMetadata = Field(default_factory=RestaurantMetadata)


class MenuCategoryMetadata(ContentModel):
    """Metadata of a menu category."""

    description: str | None = None
    image: ImageAsset | None = None
    restaurant: Restaurant | str | None = None

    @field_validator("restaurant", mode="wrap")
    @classmethod
    def validate_restaurant(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Drop a malformed restaurant reference instead of rejecting the record."""
        return _lenient(v, handler)


class MenuCategory(ContentObject):
    """Grouping of menu items within a restaurant."""

    type: Literal["menu-categories"] = MENU_CATEGORIES
    metadata: MenuCategoryMetadata = Field(default_factory=MenuCategoryMetadata)


class MenuItemMetadata(ContentModel):
    """Metadata of a menu item.

    Prices are kept as the decimal strings the content store returns.
    ``category`` and ``restaurant`` are weak references: an expanded object
    when fetched with depth 1, a bare object id otherwise.
    """

    description: str | None = None
    photo: ImageAsset | None = None
    price: str | None = None
    discounted_price: str | None = None
    ingredients: str | None = None
    tags: list[str] | None = None
    available: bool | None = None
    category: MenuCategory | str | None = None
    restaurant: Restaurant | str | None = None

    @field_validator("price", "discounted_price", mode="before")
    @classmethod
    def coerce_prices(cls, v: Any) -> Any:
        return _numeric_to_string(v)

    @field_validator("available", mode="wrap")
    @classmethod
    def validate_available(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        return _lenient(v, handler)

    @field_validator("category", "restaurant", mode="wrap")
    @classmethod
    def validate_references(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Drop malformed category or restaurant references."""
        return _lenient(v, handler)


class MenuItem(ContentObject):
    """Dish offered by a restaurant."""

    type: Literal["menu-items"] = MENU_ITEMS
    metadata: MenuItemMetadata = Field(default_factory=MenuItemMetadata)


class OrderItem(ContentModel):
    """Line of an order. Every field is optional and read defensively."""

    menu_item: str | None = None
    quantity: str | None = None
    price: str | None = None

    @field_validator("menu_item", "quantity", "price", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> Any:
        """Accept numbers where the store stores text."""
        return _numeric_to_string(v)


class OrderMetadata(ContentModel):
    """Metadata of a customer order."""

    order_number: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    delivery_address: str | None = None
    restaurant: Restaurant | str | None = None
    order_items: list[OrderItem] | None = None
    subtotal: str | None = None
    delivery_fee: str | None = None
    total: str | None = None
    order_status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    payment_method: str | None = None

    @field_validator("subtotal", "delivery_fee", "total", mode="before")
    @classmethod
    def coerce_amounts(cls, v: Any) -> Any:
        """Accept numeric amounts; they are read as decimal strings."""
        return _numeric_to_string(v)

    @field_validator("order_status", "payment_status", mode="wrap")
    @classmethod
    def validate_statuses(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Treat an empty or unknown status as missing."""
        return _lenient(v, handler)

    @field_validator("restaurant", mode="wrap")
    @classmethod
    def validate_restaurant(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Drop a malformed restaurant reference instead of rejecting the record."""
        return _lenient(v, handler)


class Order(ContentObject):
    """Customer order placed through the platform."""

    type: Literal["orders"] = ORDERS
    metadata: OrderMetadata = Field(default_factory=OrderMetadata)


class ObjectList(BaseModel):
    """Envelope returned by the content store's object listing endpoint."""

    objects: list[dict[str, Any]] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    limit: int | None = None
    skip: int = Field(default=0, ge=0)


AnyContentObject = Annotated[
    Union[Restaurant, MenuCategory, MenuItem, Order],
    Field(discriminator="type"),
]

_content_object_adapter: TypeAdapter[Any] = TypeAdapter(AnyContentObject)

T = TypeVar("T", bound=ContentObject)


def parse_content_object(raw: dict[str, Any]) -> Restaurant | MenuCategory | MenuItem | Order:
    """Parse a raw object into its typed model using the ``type`` tag.

    Args:
        raw: Object dictionary as returned by the content store

    Returns:
        The typed model matching the object's type

    Raises:
        ValidationError: If the type tag is unknown or the object is malformed
    """
    return _content_object_adapter.validate_python(raw)


def normalize_objects(object_list: ObjectList, model: type[T]) -> list[T]:
    """Cast the objects of a listing response into a typed model.

    Objects fetched with a narrow projection carry no ``type`` field, so the
    model's own tag is assumed rather than required.

    Args:
        object_list: Listing response from the content store
        model: Target model class (Restaurant, MenuItem, Order, ...)

    Returns:
        List of typed models, in fetch order
    """
    return [model.model_validate(raw) for raw in object_list.objects]


def is_restaurant(obj: ContentObject) -> bool:
    """Check whether an object is a restaurant."""
    return obj.type == RESTAURANTS


def is_menu_item(obj: ContentObject) -> bool:
    """Check whether an object is a menu item."""
    return obj.type == MENU_ITEMS


def is_order(obj: ContentObject) -> bool:
    """Check whether an object is an order."""
    return obj.type == ORDERS
