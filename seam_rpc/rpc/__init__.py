"""
JSON-RPC 2.0 Implementation Module

Provides client and server engines compliant with JSON-RPC 2.0:
- client: Correlated calls and notifications over one channel
- server: Method dispatch and broadcast over an acceptor
- api: Dynamic api.Domain.method surfaces for both engines

This module provides unified request-response semantics, independent of underlying communication protocols.
"""

from .client import Client
from .server import Server
from .api import ApiSurface, ClientApi, ServerApi
from .errors import (
    RpcError,
    InvalidArgumentError,
    CapabilityMissingError,
    ProtocolError,
    MessageError
)
from .protocol import ErrorCode

__all__ = [
    "Client",
    "Server",
    "ApiSurface",
    "ClientApi",
    "ServerApi",
    "RpcError",
    "InvalidArgumentError",
    "CapabilityMissingError",
    "ProtocolError",
    "MessageError",
    "ErrorCode"
]
