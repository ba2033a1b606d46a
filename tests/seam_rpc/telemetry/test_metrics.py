"""
Metrics helper tests
"""

from unittest.mock import patch

from seam_rpc.telemetry import metrics as rpc_metrics
from seam_rpc.telemetry.metrics import (
    get_counter,
    get_histogram,
    increment_counter,
    record_latency,
    setup_metrics
)


def test_recording_without_sdk_is_safe():
    increment_counter("test.counter", 1, {"method": "echo"})
    record_latency("test.latency", 1.5)


def test_instruments_are_cached():
    assert get_counter("test.cached", "cached counter") is get_counter("test.cached", "cached counter")
    assert get_histogram("test.cached_ms", "cached histogram") is get_histogram("test.cached_ms", "cached histogram")


def test_setup_metrics_installs_provider_and_resets_cache():
    get_counter("test.stale", "stale counter")

    with patch.object(rpc_metrics.metrics, "set_meter_provider") as set_meter_provider:
        meter = setup_metrics("test-service", otlp_endpoint=None)

    set_meter_provider.assert_called_once()
    assert meter is not None
    assert "test.stale" not in rpc_metrics._counters
