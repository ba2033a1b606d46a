"""
Transport capability interfaces

The engines only need a channel that can send strings and report 'open' and
'message' events, and an acceptor that reports new channels. Any object with
these methods works (a WebSocket library, a pipe wrapper, ...); the classes
here document the contract and are the base of the bundled adapters.
"""

import abc
from typing import Callable, Iterable, Optional


class ChannelInterface(abc.ABC):
    """One-to-one message channel consumed by Client (and by Server per connection)"""

    @abc.abstractmethod
    def send(self, message: str) -> None:
        """Send one frame of JSON text to the peer

        Args:
            message: Serialized JSON-RPC message
        """
        pass

    @abc.abstractmethod
    def on(self, event: str, callback: Callable):
        """Subscribe to channel events

        Args:
            event: 'open' (no payload) or 'message' (payload: str)
            callback: Event handler
        """
        pass

    @abc.abstractmethod
    def remove_listener(self, event: str, callback: Callable):
        """Unsubscribe a previously registered handler"""
        pass


class AcceptorInterface(abc.ABC):
    """Connection acceptor consumed by Server"""

    @abc.abstractmethod
    def on(self, event: str, callback: Callable):
        """Subscribe to acceptor events

        Args:
            event: 'connection' (payload: the new ChannelInterface)
            callback: Event handler
        """
        pass

    @property
    def clients(self) -> Optional[Iterable[ChannelInterface]]:
        """Currently connected channels, or None when broadcast is unsupported"""
        return None
