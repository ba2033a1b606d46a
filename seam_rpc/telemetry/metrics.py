"""
OpenTelemetry Metrics Collection

Counters and histograms recorded by the client and server engines. Until
setup_metrics() installs an SDK MeterProvider the OpenTelemetry API hands
out no-op instruments, so recording is always safe.
"""

import logging
import threading
from typing import Dict, Any, Optional

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    PeriodicExportingMetricReader
)
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

logger = logging.getLogger(__name__)

_METER_NAME = "seam_rpc"

# Instrument caches, keyed by instrument name
_counters = {}
_histograms = {}
_instruments_lock = threading.Lock()


def setup_metrics(service_name: str,
                  otlp_endpoint: Optional[str] = "localhost:4317",
                  export_interval_ms: int = 5000,
                  console: bool = False):
    """Configure OpenTelemetry metrics collection

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address, None to skip the OTLP exporter
        export_interval_ms: Metrics export interval in milliseconds
        console: Also export to the console (development debugging)

    Returns:
        Meter: Meter for service_name
    """
    readers = []
    if otlp_endpoint:
        readers.append(PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=otlp_endpoint),
            export_interval_millis=export_interval_ms
        ))
    if console:
        readers.append(PeriodicExportingMetricReader(
            ConsoleMetricExporter(),
            export_interval_millis=export_interval_ms
        ))

    provider = MeterProvider(metric_readers=readers)
    metrics.set_meter_provider(provider)

    # Instruments created against the previous provider are stale now
    with _instruments_lock:
        _counters.clear()
        _histograms.clear()

    logger.info(f"OpenTelemetry metrics configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return metrics.get_meter(service_name)


def get_counter(name: str, description: str, unit: str = "1"):
    """Get or create counter"""
    with _instruments_lock:
        if name not in _counters:
            meter = metrics.get_meter(_METER_NAME)
            _counters[name] = meter.create_counter(
                name=name,
                description=description,
                unit=unit
            )
        return _counters[name]


def get_histogram(name: str, description: str, unit: str = "ms"):
    """Get or create histogram

    Args:
        name: Histogram name
        description: Histogram description
        unit: Histogram unit (default "ms", representing milliseconds)
    """
    with _instruments_lock:
        if name not in _histograms:
            meter = metrics.get_meter(_METER_NAME)
            _histograms[name] = meter.create_histogram(
                name=name,
                description=description,
                unit=unit
            )
        return _histograms[name]


def increment_counter(name: str, amount: int = 1, attributes: Dict[str, Any] = None):
    """Increment counter value

    Args:
        name: Counter name
        amount: Amount to increment
        attributes: Attribute labels
    """
    counter = get_counter(name, f"Counter for {name}")
    counter.add(amount, attributes or {})


def record_latency(name: str, value_ms: float, attributes: Dict[str, Any] = None):
    """Record latency histogram

    Args:
        name: Histogram name
        value_ms: Latency value in milliseconds
        attributes: Attribute labels
    """
    histogram = get_histogram(name, f"Latency histogram for {name}")
    histogram.record(value_ms, attributes or {})
