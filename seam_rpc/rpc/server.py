"""
JSON-RPC 2.0 server engine

Dispatches requests arriving on any connection of an acceptor to exposed
handlers and replies on the originating connection. Handlers may return a
plain value, a concurrent.futures.Future, or an awaitable; deferred results
reply when they complete, without holding up other messages.
"""

import asyncio
import inspect
import logging
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Dict, Optional

from seam_rpc.config import LogOptions, get_console_logger
from seam_rpc.rpc.api import ServerApi
from seam_rpc.rpc.errors import CapabilityMissingError, InvalidArgumentError
from seam_rpc.rpc.events import EventEmitter
from seam_rpc.rpc.protocol import (
    UNKNOWN_ID,
    ErrorCode,
    error_from_code,
    is_request_id,
    make_error,
    make_notification,
    make_result,
)
from seam_rpc.telemetry.metrics import increment_counter, record_latency
from seam_rpc.telemetry.tracer import create_span
from seam_rpc.utils.serialization import from_json, to_json

logger = logging.getLogger(__name__)


async def _await(awaitable):
    return await awaitable


class Server(EventEmitter):
    """
    JSON-RPC server bound to one acceptor for its lifetime.

    Every channel the acceptor reports through its 'connection' event is
    served; replies go back to the channel the request came from.
    Notifications from clients are re-emitted as events named after their
    method. Exposing the same method name twice replaces the first handler.
    """

    def __init__(self, server, opts: Optional[Any] = None):
        """Initialize the server

        Args:
            server: Acceptor emitting 'connection' with a channel; may expose
                a 'clients' collection for broadcast
            opts: LogOptions or a mapping of logging options

        Raises:
            InvalidArgumentError: server is None
        """
        super().__init__()
        self._lock = threading.RLock()
        self._exposed_methods: Dict[str, Callable] = {}
        self._surfaces: Dict[Optional[str], ServerApi] = {}
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[threading.Thread] = None
        self.set_logging(opts)

        if server is None:
            raise InvalidArgumentError("server cannot be None")

        self._socket_server = server
        server.on("connection", self._on_connection)

    def set_logging(self, opts: Optional[Any] = None):
        """Set logging for all received and sent messages"""
        options = LogOptions.coerce(opts)
        self._emit_log = options.log_emit
        self._console_log = options.log_console
        self._handler_loop = options.loop

    def _on_connection(self, socket, *_args):
        logger.debug("Server accepted a connection")
        socket.on("message", lambda message: self.process_message(message, socket))

    def expose(self, method: str, handler: Callable):
        """Register a handler for a method name, replacing any previous one

        Args:
            method: Fully qualified dotted method name
            handler: Callable receiving the request params
        """
        with self._lock:
            self._exposed_methods[method] = handler
        logger.debug(f"Exposed RPC method: {method}")

    def exposed_methods(self):
        with self._lock:
            return sorted(self._exposed_methods)

    def process_message(self, message_str: Any, socket):
        """Handle one inbound frame from a connection

        Args:
            message_str: Raw JSON text
            socket: Channel the frame arrived on; replies are sent there
        """
        started = time.time()
        self._log_message(message_str, "receive")
        increment_counter("rpc.server.requests.received", 1)

        try:
            request = from_json(message_str)
        except (ValueError, TypeError) as e:
            logger.debug(f"Rejecting malformed JSON: {str(e)}")
            return self._send_error(socket, None, ErrorCode.PARSE_ERROR)

        if not isinstance(request, dict):
            return self._send_error(socket, None, ErrorCode.INVALID_REQUEST)

        method = request.get("method")
        if not method or not isinstance(method, str):
            return self._send_error(socket, request, ErrorCode.INVALID_REQUEST)

        if not is_request_id(request.get("id")):
            # Message is a notification, so just emit
            increment_counter("rpc.server.notifications", 1, {"method": method})
            return self._dispatch_notification(method, request.get("params"))

        with self._lock:
            handler = self._exposed_methods.get(method)

        if handler is None:
            return self._send_error(socket, request, ErrorCode.METHOD_NOT_FOUND, method)

        try:
            with create_span("rpc.server.handle", {"rpc.method": method, "rpc.id": request["id"]}):
                result = handler(request.get("params"))
        except Exception as e:
            logger.error(f"Error executing method {method}: {str(e)}")
            return self._send_error(socket, request, ErrorCode.INTERNAL_ERROR, e, started)

        self._settle(socket, request, result, started)

    def _dispatch_notification(self, method: str, params: Any):
        # A failing handler must not keep the remaining ones from running
        for handler in self.listeners(method):
            try:
                handler(params)
            except Exception as e:
                logger.error(f"Notification handler for '{method}' failed: {str(e)}")

    def _settle(self, socket, request: Dict[str, Any], result: Any, started: float):
        if isinstance(result, Future):
            deferred = result
        elif inspect.isawaitable(result):
            deferred = self._schedule(result)
        else:
            return self._send_result(socket, request, result, started)

        deferred.add_done_callback(lambda done: self._on_deferred_done(socket, request, done, started))

    def _on_deferred_done(self, socket, request: Dict[str, Any], done, started: float):
        if done.cancelled():
            return self._send_error(socket, request, ErrorCode.INTERNAL_ERROR, "cancelled", started)

        error = done.exception()
        if error is not None:
            logger.error(f"Error executing method {request['method']}: {str(error)}")
            return self._send_error(socket, request, ErrorCode.INTERNAL_ERROR, error, started)

        self._send_result(socket, request, done.result(), started)

    def _schedule(self, awaitable):
        """Run an awaitable handler result and return a future for it"""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is not None:
            return asyncio.ensure_future(awaitable)
        return asyncio.run_coroutine_threadsafe(_await(awaitable), self._event_loop())

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        if self._handler_loop is not None:
            return self._handler_loop

        with self._lock:
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._loop_thread = threading.Thread(
                    target=self._loop.run_forever,
                    name="seam-rpc-server-loop",
                    daemon=True,
                )
                self._loop_thread.start()
                logger.debug("Started background event loop for coroutine handlers")
            return self._loop

    def close(self):
        """Stop the background event loop, if one was started"""
        with self._lock:
            loop, thread = self._loop, self._loop_thread
            self._loop = self._loop_thread = None

        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=1.0)
        if not loop.is_running():
            loop.close()
        logger.debug("Background event loop stopped")

    def _log_message(self, message: Any, direction: str):
        if self._console_log:
            get_console_logger().info(f"Server {'>' if direction == 'send' else '<'} {message}")

        if self._emit_log:
            self.emit(direction, message)

    def _send(self, socket, message_str: str):
        self._log_message(message_str, "send")
        socket.send(message_str)

    def _reply(self, socket, message_str: str, request_id: Any, method: Optional[str], started: Optional[float]):
        try:
            self._send(socket, message_str)
        except Exception as e:
            logger.error(f"Failed to send reply for id {request_id}: {str(e)}")
            return

        if started is not None:
            latency_ms = (time.time() - started) * 1000
            record_latency("rpc.server.request.latency", latency_ms, {"method": method or "unknown"})

    def _send_result(self, socket, request: Dict[str, Any], result: Any, started: Optional[float] = None):
        if result is None:
            result = {}

        try:
            message_str = to_json(make_result(request["id"], result))
        except (TypeError, ValueError) as e:
            logger.error(f"Result of method {request['method']} cannot be encoded: {str(e)}")
            return self._send_error(socket, request, ErrorCode.INTERNAL_ERROR, e, started)

        self._reply(socket, message_str, request["id"], request["method"], started)

    def _send_error(self, socket, request: Optional[Dict[str, Any]], code: ErrorCode,
                    error: Any = None, started: Optional[float] = None):
        request = request or {}
        request_id = request.get("id")
        if request_id is None:
            request_id = UNKNOWN_ID

        data = error
        if isinstance(error, BaseException):
            data = str(error) or repr(error)

        method = request.get("method")
        increment_counter("rpc.server.errors", 1, {"code": str(int(code))})
        message_str = to_json(make_error(request_id, error_from_code(code, data, method)))
        self._reply(socket, message_str, request_id, method, started)

    def notify(self, method: str, params: Any = None):
        """Broadcast a notification to every connected channel

        Raises:
            CapabilityMissingError: The acceptor has no 'clients' collection
            TypeError: params cannot be encoded as JSON
        """
        clients = getattr(self._socket_server, "clients", None)
        if clients is None:
            raise CapabilityMissingError(
                'SocketServer does not support broadcasting. No "clients: LikeSocket[]" property found'
            )

        message_str = to_json(make_notification(method, params))
        for socket in list(clients):
            self._send(socket, message_str)
        increment_counter("rpc.server.broadcasts", 1, {"method": method})

    def api(self, prefix: Optional[str] = None) -> ServerApi:
        """
        Build an API surface where api.Domain.expose(module) exposes every
        public function of module as 'Domain.<name>',
        api.Domain.emitEvent(params) broadcasts a 'Domain.event' notification
        and api.Domain.onEvent(handler) handles 'Domain.event' notifications
        sent by clients.
        """
        with self._lock:
            surface = self._surfaces.get(prefix)
            if surface is None:
                surface = self._surfaces[prefix] = ServerApi(self, prefix)
            return surface
