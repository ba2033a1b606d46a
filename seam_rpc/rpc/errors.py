"""
RPC error types

Exceptions raised by the client and server engines.
"""

from typing import Any, Dict, Optional


class RpcError(Exception):
    """Base exception for seam_rpc errors."""
    pass


class InvalidArgumentError(RpcError, TypeError):
    """Raised when an engine or API surface receives an unusable argument."""
    pass


class CapabilityMissingError(RpcError):
    """Raised when a transport lacks a capability an operation requires."""
    pass


class ProtocolError(RpcError):
    """Malformed or unexpected inbound message, emitted on the client's 'error' event."""

    def __init__(self, message: str, raw: Any = None):
        super().__init__(message)
        self.raw = raw


class MessageError(RpcError):
    """
    Error response received for a pending call.

    Wraps the JSON-RPC error object so callers can inspect code, message and
    data, while the raw object stays available as ``error``.
    """

    def __init__(self, error: Optional[Dict[str, Any]] = None):
        if not isinstance(error, dict):
            error = {"message": str(error)}
        self.error = error
        self.code = error.get("code")
        self.message = error.get("message", "")
        self.data = error.get("data")
        super().__init__(self.message)

    def __repr__(self):
        return f"MessageError(code={self.code!r}, message={self.message!r}, data={self.data!r})"
