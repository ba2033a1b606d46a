"""
seam_rpc - transport-agnostic JSON-RPC 2.0

Client and Server engines that speak JSON-RPC 2.0 over anything able to send
and receive strings:

1. Message Format: compact JSON text, one message per transport frame
2. Engines: correlated calls, notifications, method exposure and broadcast
3. Adapters:
   - memory: in-process channel pairs (tests, embedding)
   - zeromq: DEALER/ROUTER sockets over tcp, ipc or inproc

Engines record OpenTelemetry metrics and spans; without an SDK configured
these are no-ops.
"""

from seam_rpc.rpc import (
    Client,
    Server,
    ErrorCode,
    RpcError,
    InvalidArgumentError,
    CapabilityMissingError,
    ProtocolError,
    MessageError
)
from seam_rpc.config import LogOptions, TelemetryConfig

__version__ = "0.1.0"

__all__ = [
    "Client",
    "Server",
    "ErrorCode",
    "RpcError",
    "InvalidArgumentError",
    "CapabilityMissingError",
    "ProtocolError",
    "MessageError",
    "LogOptions",
    "TelemetryConfig"
]
