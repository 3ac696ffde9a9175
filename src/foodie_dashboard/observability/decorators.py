"""Span decorator for service and client calls."""

import asyncio
import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode, Tracer

F = TypeVar("F", bound=Callable[..., Any])

SERVICE_NAME = "foodie-dashboard"


@contextmanager
def _call_span(tracer: Tracer, name: str, attributes: dict[str, str]) -> Iterator[Span]:
    with tracer.start_as_current_span(name, attributes=attributes, record_exception=False) as span:
        try:
            yield span
        except Exception as e:
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise
        span.set_attribute("success", True)


def traced(span_name: str | None = None, service_name: str = SERVICE_NAME) -> Callable[[F], F]:
    """Run every call of the decorated function inside its own span.

    The span records whether the call succeeded; on failure it carries the
    exception and an error status, and the exception is re-raised as is.
    Plain functions and coroutines are both supported.

    Args:
        span_name: Name for the span (defaults to the function name)
        service_name: Instrumentation scope and ``service.name`` attribute

    Returns:
        Decorator wrapping the function

    Example:
        @traced("dashboard.stats")
        async def get_dashboard_stats(self, ctx: RequestContext) -> DashboardStats:
            ...
    """

    def decorator(func: F) -> F:
        tracer = trace.get_tracer(service_name)
        name = span_name or func.__name__
        attributes = {"service.name": service_name, "code.function": func.__qualname__}

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def run_async(*args: Any, **kwargs: Any) -> Any:
                with _call_span(tracer, name, attributes):
                    return await func(*args, **kwargs)

            return run_async  # type: ignore[return-value]

        @functools.wraps(func)
        def run(*args: Any, **kwargs: Any) -> Any:
            with _call_span(tracer, name, attributes):
                return func(*args, **kwargs)

        return run  # type: ignore[return-value]

    return decorator
