"""
Communication Adapters Module

Transports implementing the channel/acceptor contract used by the engines:
- memory: in-process channel pairs
- zeromq: DEALER/ROUTER sockets
"""

from .adapter_factory import AdapterFactory, AdapterType
from .adapter_interface import ChannelInterface, AcceptorInterface
from .memory import MemoryChannel, MemoryAcceptor

__all__ = [
    "AdapterFactory",
    "AdapterType",
    "ChannelInterface",
    "AcceptorInterface",
    "MemoryChannel",
    "MemoryAcceptor"
]
