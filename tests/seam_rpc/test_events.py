"""
Event dispatcher tests
"""

import pytest

from seam_rpc.rpc.events import EventEmitter


def test_handlers_run_in_registration_order():
    emitter = EventEmitter()
    calls = []
    emitter.on("tick", lambda value: calls.append(("first", value)))
    emitter.on("tick", lambda value: calls.append(("second", value)))

    assert emitter.emit("tick", 1) is True
    assert calls == [("first", 1), ("second", 1)]


def test_same_handler_is_registered_once():
    emitter = EventEmitter()
    calls = []
    emitter.on("tick", calls.append).on("tick", calls.append)

    emitter.emit("tick", "x")
    assert calls == ["x"]


def test_emit_without_handlers_returns_false():
    assert EventEmitter().emit("nobody-listens") is False


def test_remove_listener():
    emitter = EventEmitter()
    calls = []
    emitter.on("tick", calls.append)
    emitter.remove_listener("tick", calls.append)
    emitter.remove_listener("tick", calls.append)

    emitter.emit("tick", 1)
    assert calls == []
    assert emitter.listeners("tick") == []


def test_handler_added_during_emit_runs_next_time():
    emitter = EventEmitter()
    calls = []

    def register_more(value):
        calls.append(value)
        emitter.on("tick", lambda v: calls.append(("late", v)))

    emitter.on("tick", register_more)
    emitter.emit("tick", 1)
    assert calls == [1]


def test_rejects_non_callable_handler():
    with pytest.raises(TypeError):
        EventEmitter().on("tick", "not callable")
