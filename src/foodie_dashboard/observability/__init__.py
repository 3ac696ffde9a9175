"""Logging, OpenTelemetry instrumentation and metrics."""

from foodie_dashboard.observability.config import configure_logging, setup_observability
from foodie_dashboard.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
