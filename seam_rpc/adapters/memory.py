"""
In-memory transport

Linked channel pairs that deliver frames synchronously to the peer, and an
acceptor handing out such pairs. Useful for tests and for running a Client
and a Server inside one process.
"""

import logging
from typing import List, Optional, Tuple

from seam_rpc.adapters.adapter_interface import AcceptorInterface, ChannelInterface
from seam_rpc.rpc.events import EventEmitter

logger = logging.getLogger(__name__)


class MemoryChannel(EventEmitter, ChannelInterface):
    """One end of an in-memory channel pair"""

    def __init__(self, name: str = "memory"):
        super().__init__()
        self.name = name
        self.is_open = False
        self.closed = False
        self.sent_messages: List[str] = []
        self._peer: Optional["MemoryChannel"] = None

    @classmethod
    def pair(cls, names: Tuple[str, str] = ("left", "right")) -> Tuple["MemoryChannel", "MemoryChannel"]:
        """Create two linked channel ends"""
        left, right = cls(names[0]), cls(names[1])
        left._peer, right._peer = right, left
        return left, right

    @property
    def peer(self) -> Optional["MemoryChannel"]:
        return self._peer

    def open(self):
        """Mark both ends ready and emit 'open' on each"""
        for end in (self, self._peer):
            if end is not None and not end.is_open and not end.closed:
                end.is_open = True
                end.emit("open")

    def send(self, message: str) -> None:
        if self.closed:
            raise ConnectionError(f"Channel '{self.name}' is closed")
        if self._peer is None or self._peer.closed:
            raise ConnectionError(f"Channel '{self.name}' has no connected peer")

        self.sent_messages.append(message)
        logger.debug(f"[{self.name}] -> {message[:200]}")
        self._peer.emit("message", message)

    def close(self):
        """Close both ends and emit 'close' on each"""
        for end in (self, self._peer):
            if end is not None and not end.closed:
                end.closed = True
                end.is_open = False
                end.emit("close")


class MemoryAcceptor(EventEmitter, AcceptorInterface):
    """Acceptor creating in-memory connections on demand"""

    def __init__(self, broadcast: bool = True):
        """
        Args:
            broadcast: Expose the connected channels as 'clients'; without it
                the acceptor behaves like a transport that cannot broadcast
        """
        super().__init__()
        self._broadcast = broadcast
        self._connections: List[MemoryChannel] = []

    @property
    def clients(self) -> Optional[List[MemoryChannel]]:
        if not self._broadcast:
            return None
        return list(self._connections)

    def connect(self, name: str = "client") -> MemoryChannel:
        """Open a new connection and return its client end

        The server end is announced through the 'connection' event. Neither
        end is open yet; call open() on the returned channel.
        """
        client_end, server_end = MemoryChannel.pair((name, f"{name}@server"))
        self._connections.append(server_end)
        server_end.on("close", lambda: self._forget(server_end))
        self.emit("connection", server_end)
        return client_end

    def _forget(self, channel: MemoryChannel):
        if channel in self._connections:
            self._connections.remove(channel)
