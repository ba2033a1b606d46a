"""
JSON-RPC 2.0 client engine

Issues correlated requests and notifications over any channel that can send
strings and emits 'open' / 'message' events. The client never creates the
channel itself, so it works over WebSockets, ZeroMQ, pipes or an in-memory
pair alike.
"""

import logging
import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Dict, Optional

from seam_rpc.config import LogOptions, get_console_logger
from seam_rpc.rpc.api import ClientApi
from seam_rpc.rpc.errors import InvalidArgumentError, MessageError, ProtocolError
from seam_rpc.rpc.events import EventEmitter
from seam_rpc.rpc.protocol import is_request_id, make_notification, make_request
from seam_rpc.telemetry.metrics import increment_counter
from seam_rpc.telemetry.tracer import create_span
from seam_rpc.utils.serialization import from_json, to_json

logger = logging.getLogger(__name__)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, dict, list)) and not value)


class Client(EventEmitter):
    """
    JSON-RPC client bound to one channel for its lifetime.

    Messages issued before the channel emits 'open' are queued and flushed in
    order once it does. Responses settle the future returned by call();
    server notifications are re-emitted as events named after their method.
    Protocol problems are reported on the 'error' event and never raised
    from process_message().
    """

    def __init__(self, socket, opts: Optional[Any] = None):
        """Initialize the client

        Args:
            socket: Channel with send(text) and on(event, callback)
            opts: LogOptions or a mapping of logging options

        Raises:
            InvalidArgumentError: socket is None
        """
        super().__init__()
        self._lock = threading.RLock()
        self._response_futures: Dict[int, Future] = {}
        self._next_message_id = 0
        self._connected = False
        self._request_queue = deque()
        self._surfaces: Dict[Optional[str], ClientApi] = {}
        self.set_logging(opts)

        if socket is None:
            raise InvalidArgumentError("socket cannot be None")

        self._socket = socket
        socket.on("open", self._on_open)
        socket.on("message", self.process_message)

    @property
    def connected(self) -> bool:
        return self._connected

    def pending_count(self) -> int:
        """Number of calls still waiting for a response"""
        with self._lock:
            return len(self._response_futures)

    def set_logging(self, opts: Optional[Any] = None):
        """Set logging for all received and sent messages"""
        options = LogOptions.coerce(opts)
        self._emit_log = options.log_emit
        self._console_log = options.log_console

    def _on_open(self, *_args):
        logger.debug("Client channel open, flushing queued messages")
        with self._lock:
            self._connected = True
        self._send_queued_requests()

    def process_message(self, message_str: Any):
        """Route one inbound frame to a pending call or a notification event

        Args:
            message_str: Raw JSON text received from the channel
        """
        self._log_message(message_str, "receive")

        if message_str is None:
            message = None
        else:
            try:
                message = from_json(message_str)
            except (ValueError, TypeError) as e:
                return self._emit_error(ProtocolError(str(e), message_str))

        if _is_empty(message):
            return self._emit_error(ProtocolError("Message cannot be null, empty or undefined", message_str))

        if not isinstance(message, dict):
            return self._emit_error(ProtocolError(f"Invalid message: {message_str}", message_str))

        if message.get("id") is not None:
            return self._process_response(message, message_str)

        if isinstance(message.get("method"), str):
            increment_counter("rpc.client.notifications.received", 1, {"method": message["method"]})
            return self._dispatch_notification(message["method"], message.get("params"))

        self._emit_error(ProtocolError(f"Invalid message: {message_str}", message_str))

    def _process_response(self, message: Dict[str, Any], message_str: Any):
        message_id = message["id"]
        has_outcome = "result" in message or "error" in message

        with self._lock:
            future = self._response_futures.get(message_id) if is_request_id(message_id) else None
            # Only a complete response consumes the pending call
            if future is not None and has_outcome:
                self._response_futures.pop(message_id, None)

        if future is None:
            return self._emit_error(ProtocolError(f"Response with id:{message_id} has no pending request", message_str))

        if not has_outcome:
            return self._emit_error(ProtocolError(f"Response must have result or error: {message_str}", message_str))

        if future.cancelled():
            logger.debug(f"Dropping response for cancelled call id={message_id}")
            return

        if "result" in message:
            increment_counter("rpc.client.responses", 1, {"outcome": "result"})
            future.set_result(message["result"])
        else:
            increment_counter("rpc.client.responses", 1, {"outcome": "error"})
            future.set_exception(MessageError(message["error"]))

    def _dispatch_notification(self, method: str, params: Any):
        # A failing handler must not keep the remaining ones from running
        for handler in self.listeners(method):
            try:
                handler(params)
            except Exception as e:
                logger.error(f"Notification handler for '{method}' failed: {str(e)}")

    def _emit_error(self, error: ProtocolError):
        increment_counter("rpc.client.errors", 1)
        if not self.emit("error", error):
            logger.error(f"Unhandled client protocol error: {error}")

    def _send(self, message: Dict[str, Any]):
        with self._lock:
            self._request_queue.append(to_json(message))
        self._send_queued_requests()

    def _send_queued_requests(self):
        with self._lock:
            if not self._connected:
                return
            while self._request_queue:
                message_str = self._request_queue.popleft()
                self._log_message(message_str, "send")
                self._socket.send(message_str)

    def _log_message(self, message: Any, direction: str):
        if self._console_log:
            get_console_logger().info(f"Client {'>' if direction == 'send' else '<'} {message}")

        if self._emit_log:
            self.emit(direction, message)

    def call(self, method: str, params: Any = None) -> Future:
        """Send a request and return a future for its response

        Args:
            method: Dotted method name
            params: Request parameters, left out of the message when None

        Returns:
            Future: Resolves with the response result, or fails with
            MessageError carrying the response error object
        """
        future = Future()
        with self._lock:
            self._next_message_id += 1
            message_id = self._next_message_id
            self._response_futures[message_id] = future
            try:
                with create_span("rpc.client.call", {"rpc.method": method, "rpc.id": message_id}):
                    self._send(make_request(message_id, method, params))
            except Exception:
                # Nobody holds the future yet, so the call must not stay pending
                self._response_futures.pop(message_id, None)
                raise

        increment_counter("rpc.client.requests", 1, {"method": method})
        return future

    def notify(self, method: str, params: Any = None):
        """Send a notification; no response is expected"""
        self._send(make_notification(method, params))
        increment_counter("rpc.client.notifications", 1, {"method": method})

    def api(self, prefix: Optional[str] = None) -> ClientApi:
        """
        Build an API surface where api.Domain.method(params) becomes
        client.call('Domain.method', params), api.Domain.onEvent(handler)
        subscribes to 'Domain.event' notifications and
        api.Domain.emitEvent(params) sends a 'Domain.event' notification.

        api('') returns an unprefixed surface: api('').hello() calls 'hello'.
        """
        with self._lock:
            surface = self._surfaces.get(prefix)
            if surface is None:
                surface = self._surfaces[prefix] = ClientApi(self, prefix)
            return surface
