"""
Dynamic API surface tests

Naming rules (domain / on / emit / expose / call), casing of generated
names and memoization of resolved operations.
"""

import pytest

from seam_rpc.rpc.api import ClientApi, ServerApi
from seam_rpc.rpc.client import Client
from seam_rpc.rpc.errors import InvalidArgumentError
from seam_rpc.rpc.server import Server


@pytest.fixture
def client(socket):
    client = Client(socket)
    socket.emit("open")
    return client


@pytest.fixture
def server(socket_server):
    return Server(socket_server)


class TestResolution:
    """Path resolution and memoization"""

    def test_root_names_become_domains(self, client):
        api = client.api()
        game = api.Game

        assert isinstance(game, ClientApi)
        assert game.prefix == "Game."
        # At the root even on/emit-looking names are domains
        assert api.onLevelUp.prefix == "onLevelUp."

    def test_navigation_is_referentially_stable(self, client):
        api = client.api()

        assert api.Game is api.Game
        assert api.Game.help is api.Game.help
        assert api.Game.onLevelUp is api.Game.onLevelUp
        assert api.resolve("Game", "help") is api.Game.help

    def test_resolve_reaches_names_shadowed_by_attributes(self, client, socket):
        api = client.api()
        api.resolve("Tools", "resolve")({"path": "/"})

        assert socket.last_sent == '{"id":1,"method":"Tools.resolve","params":{"path":"/"}}'

    def test_private_names_are_not_resolved(self, client):
        api = client.api("")
        with pytest.raises(AttributeError):
            api._hidden
        assert not hasattr(api, "__wrapped__")

    def test_resolve_past_an_operation_is_none(self, client):
        assert client.api().resolve("Game", "help", "deeper") is None


class TestClientApi:
    """Client surface operations"""

    def test_unknown_name_calls_method(self, client, socket):
        future = client.api().Runtime.enable()

        assert socket.last_sent == '{"id":1,"method":"Runtime.enable"}'
        assert not future.done()

    def test_on_subscribes_with_lower_camel_event(self, client):
        received = []
        client.api().Game.onLevelUp(received.append)
        client.process_message('{"method":"Game.levelUp","params":{"level":2}}')

        assert received == [{"level": 2}]
        assert client.listeners("Game.levelUp") == [received.append]

    def test_on_keeps_rest_of_tail_unchanged(self, client):
        client.api().Net.onHTTPDone(print)

        assert client.listeners("Net.hTTPDone") == [print]

    def test_emit_sends_notification(self, client, socket):
        client.api().Game.emitPlayerJoined({"name": "ada"})

        assert socket.last_sent == '{"method":"Game.playerJoined","params":{"name":"ada"}}'

    def test_short_names_fall_through_to_call(self, client, socket):
        api = client.api("")
        api.onX()
        api.emitY()

        assert socket.sent == ['{"id":1,"method":"onX"}', '{"id":2,"method":"emitY"}']

    def test_operation_exposes_target_name(self, client):
        api = client.api()

        assert api.Game.help.rpc_name == "Game.help"
        assert api.Game.onLevelUp.rpc_name == "Game.levelUp"
        assert api.Game.emitDying.rpc_name == "Game.dying"


class TestServerApi:
    """Server surface operations"""

    def test_unknown_names_are_not_present(self, server):
        api = server.api("")

        assert api.resolve("hello") is None
        with pytest.raises(AttributeError):
            api.hello

    def test_expose_mapping(self, server, socket_server):
        connection = socket_server.connect()
        server.api().game.expose({
            "help": lambda params: {"acknowledged": params["lives"] > 0},
            "version": "1.0",
        })

        connection.emit("message", '{"id":1,"method":"game.help","params":{"lives":2}}')

        assert connection.last_sent == '{"id":1,"result":{"acknowledged":true}}'
        assert server.exposed_methods() == ["game.help"]

    def test_expose_object_methods(self, server):
        class Profiler:
            def __init__(self):
                self.running = False

            def start(self, params):
                self.running = True

            def stop(self, params):
                self.running = False
                return {"profile": {"startTime": 0, "endTime": 100}}

            def _internal(self, params):
                pass

        profiler = Profiler()
        server.api().Profiler.expose(profiler)

        assert server.exposed_methods() == ["Profiler.start", "Profiler.stop"]

    def test_expose_rejects_non_objects(self, server):
        api = server.api("")
        for bad in (None, "blah", 42, True, b"raw"):
            with pytest.raises(InvalidArgumentError, match="Expected an iterable object to expose functions"):
                api.expose(bad)

    def test_emit_broadcasts(self, server, socket_server, make_socket):
        listener = make_socket()
        socket_server.clients = [listener]
        server.api().Runtime.emitExecutionContextDestroyed({"executionContextId": 1})

        assert listener.sent == ['{"method":"Runtime.executionContextDestroyed","params":{"executionContextId":1}}']

    def test_on_handles_client_notifications(self, server, socket_server):
        connection = socket_server.connect()
        received = []
        server.api("").onDying(received.append)

        connection.emit("message", '{"method":"dying","params":{"health":2}}')

        assert received == [{"health": 2}]

    def test_surface_type(self, server):
        assert isinstance(server.api(), ServerApi)
        assert isinstance(server.api().Debugger, ServerApi)
