"""
Configuration settings for seam_rpc engines and telemetry
"""
import os
import sys
import logging
import asyncio
from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass

CONSOLE_LOGGER_NAME = "seam_rpc.console"

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


class _StderrHandler(logging.StreamHandler):
    """Stream handler that always writes to the current sys.stderr"""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, _value):
        pass


def get_console_logger() -> logging.Logger:
    """Logger used for the human-readable send/receive trace"""
    console = logging.getLogger(CONSOLE_LOGGER_NAME)
    if not any(isinstance(h, _StderrHandler) for h in console.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        console.addHandler(handler)
        console.setLevel(logging.INFO)
        console.propagate = False
    return console


@dataclass
class LogOptions:
    """Message logging options shared by Client and Server"""
    log_emit: bool = False  # re-emit every message as 'send' / 'receive' events
    log_console: bool = False  # write a send/receive trace to stderr
    loop: Optional[asyncio.AbstractEventLoop] = None  # loop for coroutine handlers (Server)

    @classmethod
    def from_dict(cls, options: Optional[Mapping[str, Any]]) -> "LogOptions":
        """Create options from a mapping

        Accepts the wire-protocol spelling (logToEvents, logToConsole), the
        short camelCase spelling (logEmit, logConsole) and field names.
        """
        if not options:
            return cls()

        def pick(*keys):
            for key in keys:
                if key in options:
                    return bool(options[key])
            return False

        return cls(
            log_emit=pick("logToEvents", "logEmit", "log_emit"),
            log_console=pick("logToConsole", "logConsole", "log_console"),
            loop=options.get("loop"),
        )

    @classmethod
    def from_env(cls) -> "LogOptions":
        """Create options from environment variables"""
        return cls(
            log_emit=_env_flag("SEAM_RPC_LOG_EMIT"),
            log_console=_env_flag("SEAM_RPC_LOG_CONSOLE"),
        )

    @classmethod
    def coerce(cls, opts: Any) -> "LogOptions":
        """Accept None, a LogOptions instance or a mapping"""
        if opts is None:
            return cls()
        if isinstance(opts, cls):
            return opts
        if isinstance(opts, Mapping):
            return cls.from_dict(opts)
        raise TypeError(f"Unsupported options type: {type(opts).__name__}")


@dataclass
class TelemetryConfig:
    """OpenTelemetry export configuration"""
    service_name: str = "seam_rpc"
    otlp_endpoint: str = "localhost:4317"
    enable_metrics: bool = False
    enable_tracing: bool = False
    export_interval_ms: int = 5000

    @classmethod
    def from_env(cls) -> "TelemetryConfig":
        """Create config from environment variables"""
        return cls(
            service_name=os.getenv("SEAM_RPC_SERVICE_NAME", "seam_rpc"),
            otlp_endpoint=os.getenv("SEAM_RPC_OTLP_ENDPOINT", "localhost:4317"),
            enable_metrics=_env_flag("SEAM_RPC_ENABLE_METRICS"),
            enable_tracing=_env_flag("SEAM_RPC_ENABLE_TRACING"),
            export_interval_ms=int(os.getenv("SEAM_RPC_EXPORT_INTERVAL_MS", "5000")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "service_name": self.service_name,
            "otlp_endpoint": self.otlp_endpoint,
            "enable_metrics": self.enable_metrics,
            "enable_tracing": self.enable_tracing,
            "export_interval_ms": self.export_interval_ms,
        }


def configure_telemetry(config: TelemetryConfig) -> Dict[str, Any]:
    """Install OpenTelemetry providers according to config

    Returns:
        Dict: The meter and tracer that were set up (None when disabled)
    """
    from seam_rpc.telemetry.metrics import setup_metrics
    from seam_rpc.telemetry.tracer import setup_tracer

    configured = {"meter": None, "tracer": None}
    if config.enable_metrics:
        configured["meter"] = setup_metrics(
            config.service_name,
            otlp_endpoint=config.otlp_endpoint,
            export_interval_ms=config.export_interval_ms,
        )
    if config.enable_tracing:
        configured["tracer"] = setup_tracer(config.service_name, otlp_endpoint=config.otlp_endpoint)
    return configured
