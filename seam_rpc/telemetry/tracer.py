"""
OpenTelemetry Tracing

Tracer setup and span helpers. Spans wrap client calls and server handler
invocations; trace context is not injected into the wire messages, which
stay plain JSON-RPC.
"""

import logging
from typing import Dict, Any

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter,
)

logger = logging.getLogger(__name__)

_TRACER_NAME = "seam_rpc"


def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317"):
    """Configure OpenTelemetry tracer

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address

    Returns:
        Tracer for service_name
    """
    provider = TracerProvider(sampler=ALWAYS_ON)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    trace.set_tracer_provider(provider)

    tracer = trace.get_tracer(service_name)

    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return tracer


def create_span(name: str, attributes: Dict[str, Any] = None, kind=trace.SpanKind.INTERNAL):
    """Create new span

    Args:
        name: Span name
        attributes: Span attributes
        kind: Span kind

    Returns:
        Context manager that starts the span and makes it current
    """
    tracer = trace.get_tracer(_TRACER_NAME)
    return tracer.start_as_current_span(
        name,
        attributes=attributes or {},
        kind=kind,
    )
