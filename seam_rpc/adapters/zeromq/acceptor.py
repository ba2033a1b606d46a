"""
ZeroMQ acceptor

ROUTER socket implementing the acceptor contract. Each peer identity seen on
the socket becomes a ZeroMQConnection, announced through the 'connection'
event when its first frame arrives; replies are routed back by identity.
"""

import zmq
import time
import logging
import threading
from typing import Dict, List, Optional

from seam_rpc.adapters.adapter_interface import AcceptorInterface, ChannelInterface
from seam_rpc.adapters.zeromq.channel import frame_text
from seam_rpc.rpc.events import EventEmitter
from seam_rpc.telemetry.metrics import increment_counter

logger = logging.getLogger(__name__)


class ZeroMQConnection(EventEmitter, ChannelInterface):
    """Server-side channel for one DEALER peer"""

    def __init__(self, acceptor: "ZeroMQAcceptor", identity: bytes):
        super().__init__()
        self.acceptor = acceptor
        self.identity = identity

    def send(self, message: str) -> None:
        self.acceptor.send_to(self.identity, message)

    def __repr__(self):
        return f"<ZeroMQConnection identity={self.identity.hex()}>"


class ZeroMQAcceptor(EventEmitter, AcceptorInterface):
    """
    ZeroMQ ROUTER acceptor

    'clients' lists every peer that has sent at least one frame; ROUTER
    sockets do not report disconnects, so a peer stays listed until forget()
    is called for it.
    """

    def __init__(self,
                 bind_address: str = "tcp://*:5555",
                 context: Optional[zmq.Context] = None):
        """Initialize ZeroMQ acceptor

        Args:
            bind_address: ROUTER bind address; "tcp://127.0.0.1:*" picks a free port
            context: ZeroMQ context, a private one is created when omitted
        """
        super().__init__()
        self._owns_context = context is None
        self.context = context or zmq.Context()
        self.socket = self.context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.bind(bind_address)
        self.address = self.socket.getsockopt_string(zmq.LAST_ENDPOINT)
        self._socket_lock = threading.Lock()
        self._connections: Dict[bytes, ZeroMQConnection] = {}
        self.running = False
        self.server_thread = None

        logger.info(f"ZeroMQ acceptor bound to {self.address}")

    @property
    def clients(self) -> List[ZeroMQConnection]:
        return list(self._connections.values())

    def start(self, threaded: bool = True):
        """Start accepting frames

        Args:
            threaded: Run the receive loop in a background thread
        """
        self.running = True
        if threaded:
            self.server_thread = threading.Thread(target=self._run_server, name="seam-rpc-zmq-acceptor", daemon=True)
            self.server_thread.start()
            logger.info("ZeroMQ acceptor started in background thread")
        else:
            logger.info("ZeroMQ acceptor started in main thread")
            self._run_server()

    def stop(self):
        """Stop the receive loop"""
        self.running = False
        if self.server_thread is not None:
            self.server_thread.join(timeout=1.0)
            self.server_thread = None
            logger.info("ZeroMQ acceptor stopped")

    def close(self):
        """Stop and release the socket"""
        self.stop()
        if self.socket is not None:
            self.socket.close()
            self.socket = None
        if self._owns_context and self.context is not None:
            self.context.term()
            self.context = None

    def forget(self, identity: bytes):
        """Drop a peer from 'clients'"""
        self._connections.pop(identity, None)

    def send_to(self, identity: bytes, message: str):
        with self._socket_lock:
            self.socket.send_multipart([identity, message.encode("utf-8")])
        increment_counter("transport.zeromq.frames.sent", 1, {"side": "acceptor"})

    def _run_server(self):
        """Receive loop"""
        while self.running:
            try:
                with self._socket_lock:
                    identity, frame = self.socket.recv_multipart(flags=zmq.NOBLOCK)
            except zmq.error.Again:
                # No message, keep polling
                time.sleep(0.001)
                continue
            except zmq.error.ZMQError as e:
                if self.running:
                    logger.error(f"ZeroMQ acceptor receive error: {str(e)}")
                break
            except ValueError:
                logger.error("Dropping frame with unexpected part count")
                continue

            increment_counter("transport.zeromq.frames.received", 1, {"side": "acceptor"})
            try:
                self._connection_for(identity).emit("message", frame_text(frame))
            except Exception as e:
                logger.error(f"Error handling inbound frame: {str(e)}")

    def _connection_for(self, identity: bytes) -> ZeroMQConnection:
        connection = self._connections.get(identity)
        if connection is None:
            connection = self._connections[identity] = ZeroMQConnection(self, identity)
            logger.debug(f"New ZeroMQ peer: {identity.hex()}")
            self.emit("connection", connection)
        return connection
