"""
Dynamic API surface

Turns a dotted naming convention into engine operations without a static
binding per method:

    api = client.api()
    api.Runtime.enable()              -> client.call("Runtime.enable", None)
    api.Runtime.onContextCreated(cb)  -> client.on("Runtime.contextCreated", cb)
    api.Runtime.emitReady(params)     -> client.notify("Runtime.ready", params)

    api = server.api()
    api.Runtime.expose({"enable": enable})  -> server.expose("Runtime.enable", enable)

Resolution is an explicit memoizing registry: resolve() walks path segments,
building each operation once and caching it on its parent node, so
api.Domain.method is the same object every time. Attribute access is a thin
convenience over resolve(); use resolve() directly for names that collide
with the surface's own attributes.
"""

import inspect
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from seam_rpc.rpc.errors import InvalidArgumentError

# Values that can never be exposed as a module of functions
_SCALAR_TYPES = (str, bytes, bytearray, int, float, bool)


def _lower_first(tail: str) -> str:
    return tail[0].lower() + tail[1:]


def _public_callables(module: Any) -> List[Tuple[str, Callable]]:
    """Collect the exposable functions of a mapping or object"""
    if module is None or isinstance(module, _SCALAR_TYPES):
        raise InvalidArgumentError("Expected an iterable object to expose functions")

    if isinstance(module, Mapping):
        members = module.items()
    else:
        members = inspect.getmembers(module)

    return [
        (str(name), func) for name, func in members
        if callable(func) and not str(name).startswith("_")
    ]


class ApiSurface:
    """Node of the API tree, scoped to a dotted prefix (None at the root)"""

    def __init__(self, engine, prefix: Optional[str] = None):
        self._engine = engine
        self._prefix = prefix
        self._children: Dict[str, Any] = {}
        self._children_lock = threading.RLock()

    @property
    def prefix(self) -> Optional[str]:
        return self._prefix

    def resolve(self, *segments: str) -> Any:
        """Resolve a path of names to an operation

        Args:
            *segments: Names to walk, e.g. ("Game", "onLevelUp")

        Returns:
            A child surface, an operation callable, or None when the path
            does not name anything
        """
        node = self
        for segment in segments:
            if not isinstance(node, ApiSurface):
                return None
            node = node._child(segment)
            if node is None:
                return None
        return node

    def _child(self, name: str) -> Any:
        with self._children_lock:
            if name in self._children:
                return self._children[name]

            operation = self._build(name)
            if operation is not None:
                self._children[name] = operation
            return operation

    def _build(self, name: str) -> Any:
        if self._prefix is None:
            return type(self)(self._engine, f"{name}.")

        engine = self._engine
        prefix = self._prefix

        if name.startswith("on") and len(name) > 3:
            event = f"{prefix}{_lower_first(name[2:])}"

            def subscribe(handler: Callable):
                engine.on(event, handler)

            return _named(subscribe, name, event)

        if name.startswith("emit") and len(name) > 5:
            method = f"{prefix}{_lower_first(name[4:])}"

            def emit(params: Any = None):
                engine.notify(method, params)

            return _named(emit, name, method)

        return self._build_method(name)

    def _build_method(self, name: str) -> Any:
        return None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        operation = self._child(name)
        if operation is None:
            raise AttributeError(f"'{type(self).__name__}' at '{self._prefix or ''}' has no operation '{name}'")
        return operation

    def __repr__(self):
        return f"<{type(self).__name__} prefix={self._prefix!r}>"


class ClientApi(ApiSurface):
    """API surface backed by a Client: unknown names become calls"""

    def _build_method(self, name: str) -> Any:
        engine = self._engine
        method = f"{self._prefix}{name}"

        def call(params: Any = None):
            return engine.call(method, params)

        return _named(call, name, method)


class ServerApi(ApiSurface):
    """API surface backed by a Server: adds expose(), no catch-all"""

    def _build_method(self, name: str) -> Any:
        if name != "expose":
            return None

        engine = self._engine
        prefix = self._prefix

        def expose(module: Any):
            for func_name, func in _public_callables(module):
                engine.expose(f"{prefix}{func_name}", func)

        return _named(expose, name, prefix)


def _named(func: Callable, name: str, target: Optional[str]) -> Callable:
    func.__name__ = name
    func.__qualname__ = name
    func.rpc_name = target
    return func
