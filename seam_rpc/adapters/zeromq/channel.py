"""
ZeroMQ client channel

DEALER socket implementing the one-to-one channel contract: send(text) and
'open' / 'message' events. A background thread polls for inbound frames.
"""

import zmq
import time
import logging
import threading
from typing import Optional

from seam_rpc.adapters.adapter_interface import ChannelInterface
from seam_rpc.rpc.events import EventEmitter
from seam_rpc.telemetry.metrics import increment_counter

logger = logging.getLogger(__name__)


def frame_text(frame: bytes):
    """Decode an inbound frame, passing undecodable bytes through unchanged

    The engines reject non UTF-8 frames themselves: the server answers with
    a parse error and the client emits 'error'.
    """
    try:
        return frame.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Inbound frame is not valid UTF-8")
        return frame


class ZeroMQChannel(EventEmitter, ChannelInterface):
    """
    ZeroMQ DEALER channel connected to a ZeroMQAcceptor

    'open' is emitted by start(), so a Client constructed on the channel
    first queues its messages and flushes them once the channel runs.
    """

    def __init__(self,
                 server_address: str = "tcp://localhost:5555",
                 context: Optional[zmq.Context] = None):
        """Initialize ZeroMQ channel

        Args:
            server_address: Address of the ZeroMQAcceptor
            context: ZeroMQ context, a private one is created when omitted
        """
        super().__init__()
        self.server_address = server_address
        self._owns_context = context is None
        self.context = context or zmq.Context()
        self.socket = self.context.socket(zmq.DEALER)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.connect(server_address)
        self._socket_lock = threading.Lock()
        self.running = False
        self.poll_thread = None
        logger.info(f"ZeroMQ channel connected to {server_address}")

    def start(self):
        """Start receiving and emit 'open'"""
        if self.running:
            return
        self.running = True
        self.poll_thread = threading.Thread(target=self._run, name="seam-rpc-zmq-channel", daemon=True)
        self.poll_thread.start()
        self.emit("open")

    def send(self, message: str) -> None:
        with self._socket_lock:
            self.socket.send(message.encode("utf-8"))
        increment_counter("transport.zeromq.frames.sent", 1, {"side": "channel"})

    def _run(self):
        """Receive loop"""
        while self.running:
            try:
                with self._socket_lock:
                    frame = self.socket.recv(flags=zmq.NOBLOCK)
            except zmq.error.Again:
                # No message, keep polling
                time.sleep(0.001)
                continue
            except zmq.error.ZMQError as e:
                if self.running:
                    logger.error(f"ZeroMQ channel receive error: {str(e)}")
                break

            increment_counter("transport.zeromq.frames.received", 1, {"side": "channel"})
            try:
                self.emit("message", frame_text(frame))
            except Exception as e:
                logger.error(f"Error handling inbound frame: {str(e)}")

    def close(self):
        """Stop the receive loop and release the socket"""
        self.running = False
        if self.poll_thread is not None:
            self.poll_thread.join(timeout=1.0)
            self.poll_thread = None
        if self.socket is not None:
            self.socket.close()
            self.socket = None
        if self._owns_context and self.context is not None:
            self.context.term()
            self.context = None
        self.emit("close")
