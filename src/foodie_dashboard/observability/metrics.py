"""Custom metrics for the dashboard service."""

from opentelemetry import metrics

meter = metrics.get_meter("foodie-dashboard")

content_fetch_counter = meter.create_counter(
    name="content_fetch_total",
    description="Content store fetches by object type and outcome",
    unit="1",
)

content_fetch_duration = meter.create_histogram(
    name="content_fetch_duration_seconds",
    description="Duration of content store fetches by object type",
    unit="s",
)

empty_fallback_counter = meter.create_counter(
    name="content_empty_fallback_total",
    description="Fetches degraded to an empty result after a not-found response",
    unit="1",
)

page_render_counter = meter.create_counter(
    name="page_render_total",
    description="Rendered dashboard pages by page and outcome",
    unit="1",
)


def record_content_fetch(object_type: str, outcome: str, duration_seconds: float) -> None:
    """Record a content store fetch.

    Args:
        object_type: Object type that was fetched (e.g., "orders")
        outcome: One of "success", "not_found" or "error"
        duration_seconds: Duration in seconds
    """
    attributes = {"object_type": object_type, "outcome": outcome}
    content_fetch_counter.add(1, attributes)
    content_fetch_duration.record(duration_seconds, {"object_type": object_type})


def record_empty_fallback(object_type: str) -> None:
    """Record a not-found response that was served as an empty result."""
    empty_fallback_counter.add(1, {"object_type": object_type})


def record_page_render(page: str, success: bool) -> None:
    """Record a page render.

    Args:
        page: Page name (e.g., "dashboard", "orders")
        success: Whether the page rendered without falling back to the error page
    """
    page_render_counter.add(1, {"page": page, "success": success})
