"""
Event dispatcher

Maps event names to an ordered set of handlers. Used by the engines for
notification routing, the 'error' channel and send/receive log events, and
by the in-memory transport.
"""

import threading
from typing import Any, Callable, Dict, List


class EventEmitter:
    """Synchronous publish/subscribe keyed by event name"""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {}
        self._handlers_lock = threading.RLock()

    def on(self, event: str, handler: Callable) -> "EventEmitter":
        """Register a handler for an event

        Registering the same handler twice for one event keeps a single entry.

        Args:
            event: Event name
            handler: Callable invoked with the emitted arguments

        Returns:
            EventEmitter: self, so registrations can be chained
        """
        if not callable(handler):
            raise TypeError(f"handler for '{event}' must be callable")
        with self._handlers_lock:
            handlers = self._handlers.setdefault(event, [])
            if handler not in handlers:
                handlers.append(handler)
        return self

    def remove_listener(self, event: str, handler: Callable) -> "EventEmitter":
        with self._handlers_lock:
            handlers = self._handlers.get(event)
            if handlers and handler in handlers:
                handlers.remove(handler)
                if not handlers:
                    del self._handlers[event]
        return self

    def listeners(self, event: str) -> List[Callable]:
        with self._handlers_lock:
            return list(self._handlers.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """Invoke every handler registered for an event, in registration order

        Args:
            event: Event name
            *args: Arguments passed to each handler

        Returns:
            bool: True if at least one handler was called
        """
        handlers = self.listeners(event)
        for handler in handlers:
            handler(*args)
        return bool(handlers)
