"""Structured logging and OpenTelemetry provider setup."""

import logging
import os
import sys

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

DEFAULT_OTLP_ENDPOINT = "http://localhost:4318"
METRIC_EXPORT_INTERVAL_MS = 60_000
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def get_service_resource() -> Resource:
    """Resource attributes attached to every span and metric of this process."""
    return Resource.create(
        {
            "service.name": os.getenv("OTEL_SERVICE_NAME", "foodie-dashboard"),
            "deployment.environment": os.getenv("ENVIRONMENT", "development"),
        }
    )


def _otlp_endpoint() -> str:
    return os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT).rstrip("/")


def build_providers(resource: Resource, export: bool) -> tuple[TracerProvider, MeterProvider]:
    """Create tracer and meter providers, wired to OTLP/HTTP exporters when ``export`` is set.

    Args:
        resource: Resource shared by both providers
        export: Whether spans and metrics leave the process

    Returns:
        Tuple of (tracer provider, meter provider)
    """
    tracer_provider = TracerProvider(resource=resource)
    if not export:
        return tracer_provider, MeterProvider(resource=resource)

    endpoint = _otlp_endpoint()
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces"))
    )
    metric_reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics"),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    logger.info(f"Exporting traces and metrics to {endpoint}")
    return tracer_provider, MeterProvider(resource=resource, metric_readers=[metric_reader])


def setup_observability(app: FastAPI | None = None, enable_exporters: bool = True) -> None:
    """Install global OpenTelemetry providers and instrument HTTP traffic.

    Outgoing content store requests are traced through the httpx
    instrumentation and incoming page requests through the FastAPI one.
    With ``ENVIRONMENT=test`` nothing is exported.

    Args:
        app: FastAPI application whose routes should be instrumented
        enable_exporters: Whether to export to the OTLP endpoint
    """
    export = enable_exporters and os.getenv("ENVIRONMENT", "development") != "test"

    tracer_provider, meter_provider = build_providers(get_service_resource(), export)
    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(meter_provider)

    HTTPXClientInstrumentor().instrument()
    if app is not None:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider)

    logger.info(f"OpenTelemetry configured (export={'on' if export else 'off'})")


def configure_logging(log_level: str = "INFO") -> None:
    """Send JSON formatted records from every logger to stdout.

    ``LOG_LEVEL`` takes precedence over ``log_level``; unknown level names
    fall back to INFO. Handlers installed earlier on the root logger are
    replaced so repeated calls do not duplicate output.

    Args:
        log_level: Level used when ``LOG_LEVEL`` is not set
    """
    level_name = os.getenv("LOG_LEVEL", log_level).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        jsonlogger.JsonFormatter(LOG_FORMAT, rename_fields={"levelname": "level"}, timestamp=True)
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level_name, logging.INFO))

    logger.info(f"JSON logging enabled at {level_name}")
