"""
Tests for engine and telemetry configuration
"""
import os
import asyncio
import logging
import pytest
from unittest.mock import patch

from seam_rpc.config import (
    CONSOLE_LOGGER_NAME,
    LogOptions,
    TelemetryConfig,
    configure_telemetry,
    get_console_logger
)


class TestLogOptions:
    """Test message logging options"""

    def test_default_values(self):
        options = LogOptions()
        assert options.log_emit is False
        assert options.log_console is False
        assert options.loop is None

    @pytest.mark.parametrize("mapping", [
        {"logToEvents": True, "logToConsole": True},
        {"logEmit": True, "logConsole": True},
        {"log_emit": True, "log_console": True},
    ])
    def test_from_dict_spellings(self, mapping):
        options = LogOptions.from_dict(mapping)
        assert options.log_emit is True
        assert options.log_console is True

    def test_from_dict_keeps_loop(self):
        loop = asyncio.new_event_loop()
        try:
            assert LogOptions.from_dict({"loop": loop}).loop is loop
        finally:
            loop.close()

    def test_from_env(self):
        with patch.dict(os.environ, {"SEAM_RPC_LOG_EMIT": "true", "SEAM_RPC_LOG_CONSOLE": "0"}):
            options = LogOptions.from_env()
            assert options.log_emit is True
            assert options.log_console is False

    def test_coerce(self):
        options = LogOptions(log_emit=True)
        assert LogOptions.coerce(options) is options
        assert LogOptions.coerce(None) == LogOptions()
        assert LogOptions.coerce({"logConsole": True}).log_console is True

        with pytest.raises(TypeError, match="Unsupported options type"):
            LogOptions.coerce(["logConsole"])


class TestConsoleLogger:
    """Test the send/receive trace logger"""

    def test_single_handler(self):
        first = get_console_logger()
        second = get_console_logger()
        assert first is second
        assert first.name == CONSOLE_LOGGER_NAME
        assert len(first.handlers) == 1
        assert first.propagate is False

    def test_writes_to_current_stderr(self, capsys):
        get_console_logger().info("Client > hello")
        assert "Client > hello" in capsys.readouterr().err


class TestTelemetryConfig:
    """Test telemetry configuration"""

    def test_default_values(self):
        config = TelemetryConfig()
        assert config.service_name == "seam_rpc"
        assert config.otlp_endpoint == "localhost:4317"
        assert config.enable_metrics is False
        assert config.enable_tracing is False

    def test_from_env(self):
        with patch.dict(os.environ, {
            "SEAM_RPC_SERVICE_NAME": "game-server",
            "SEAM_RPC_OTLP_ENDPOINT": "collector:4317",
            "SEAM_RPC_ENABLE_METRICS": "yes",
            "SEAM_RPC_EXPORT_INTERVAL_MS": "1000"
        }):
            config = TelemetryConfig.from_env()
            assert config.service_name == "game-server"
            assert config.otlp_endpoint == "collector:4317"
            assert config.enable_metrics is True
            assert config.enable_tracing is False
            assert config.export_interval_ms == 1000

    def test_to_dict(self):
        config_dict = TelemetryConfig(service_name="svc").to_dict()
        assert config_dict["service_name"] == "svc"
        assert "otlp_endpoint" in config_dict
        assert "export_interval_ms" in config_dict

    def test_configure_telemetry_disabled(self):
        assert configure_telemetry(TelemetryConfig()) == {"meter": None, "tracer": None}

    def test_configure_telemetry_enabled(self):
        config = TelemetryConfig(enable_metrics=True, enable_tracing=True, otlp_endpoint="collector:4317")
        with patch("seam_rpc.telemetry.metrics.setup_metrics", return_value="meter") as setup_metrics, \
                patch("seam_rpc.telemetry.tracer.setup_tracer", return_value="tracer") as setup_tracer:
            configured = configure_telemetry(config)

        assert configured == {"meter": "meter", "tracer": "tracer"}
        setup_metrics.assert_called_once_with("seam_rpc", otlp_endpoint="collector:4317", export_interval_ms=5000)
        setup_tracer.assert_called_once_with("seam_rpc", otlp_endpoint="collector:4317")
