"""OpenTelemetry configuration and initialization."""

from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)


def configure_opentelemetry(
    service_name: str,
    otlp_endpoint: str,
    enabled: bool = False,
) -> None:
    """Install an SDK tracer provider exporting spans over OTLP.

    Args:
        service_name: Name reported as ``service.name``
        otlp_endpoint: OTLP collector endpoint
        enabled: Whether tracing is enabled
    """
    if not enabled:
        logger.info("OpenTelemetry tracing is disabled")
        return

    try:
        resource = Resource.create(
            {"service.name": service_name, "service.namespace": "kmb-eta"}
        )
        tracer_provider = TracerProvider(resource=resource)
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint))
        )
        trace.set_tracer_provider(tracer_provider)
        logger.info(
            "OpenTelemetry configured for '%s' exporting to %s",
            service_name,
            otlp_endpoint,
        )
    except Exception as e:
        logger.warning(f"Failed to configure OpenTelemetry: {e}")
        logger.info("Continuing without tracing")


def instrument_httpx(enabled: bool = False) -> None:
    """Instrument httpx client for tracing."""
    if not enabled:
        return

    try:
        HTTPXClientInstrumentor().instrument()
        logger.info("HTTPX client instrumentation enabled")
    except Exception as e:
        logger.warning(f"Failed to instrument HTTPX: {e}")


def get_tracer() -> trace.Tracer:
    """Get the configured tracer instance."""
    return trace.get_tracer("kmb_eta")
