"""
Adapter factory

Creates transport channels and acceptors (memory, ZeroMQ) from a type name
and a configuration dictionary.
"""

from typing import Dict, Any

from seam_rpc.adapters.adapter_interface import AcceptorInterface, ChannelInterface
from seam_rpc.adapters.memory import MemoryAcceptor
from seam_rpc.adapters.zeromq.channel import ZeroMQChannel
from seam_rpc.adapters.zeromq.acceptor import ZeroMQAcceptor


class AdapterType:
    """Adapter type constants"""
    MEMORY = "memory"
    ZEROMQ = "zeromq"


class AdapterFactory:
    """Factory for transport adapters"""

    @staticmethod
    def create_channel(adapter_type: str, config: Dict[str, Any] = None) -> ChannelInterface:
        """Create a client channel

        Args:
            adapter_type: "zeromq" (memory channels come from MemoryAcceptor.connect())
            config: Adapter configuration

        Returns:
            ChannelInterface: Channel instance, not yet started

        Raises:
            ValueError: Invalid adapter type
        """
        if config is None:
            config = {}

        if adapter_type.lower() == AdapterType.ZEROMQ:
            return ZeroMQChannel(
                server_address=config.get("server_address", "tcp://localhost:5555"),
                context=config.get("context")
            )
        else:
            raise ValueError(f"Invalid channel adapter type: {adapter_type}")

    @staticmethod
    def create_acceptor(adapter_type: str, config: Dict[str, Any] = None) -> AcceptorInterface:
        """Create a connection acceptor

        Args:
            adapter_type: "memory" or "zeromq"
            config: Adapter configuration

        Returns:
            AcceptorInterface: Acceptor instance

        Raises:
            ValueError: Invalid adapter type
        """
        if config is None:
            config = {}

        if adapter_type.lower() == AdapterType.MEMORY:
            return MemoryAcceptor(broadcast=config.get("broadcast", True))
        elif adapter_type.lower() == AdapterType.ZEROMQ:
            return ZeroMQAcceptor(
                bind_address=config.get("bind_address", "tcp://*:5555"),
                context=config.get("context")
            )
        else:
            raise ValueError(f"Invalid acceptor adapter type: {adapter_type}")
