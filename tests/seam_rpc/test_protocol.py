"""
Message model and wire serialization tests
"""

import json

import pytest

from seam_rpc.rpc.errors import MessageError
from seam_rpc.rpc.protocol import (
    ErrorCode,
    error_from_code,
    is_request_id,
    make_error,
    make_notification,
    make_request,
    make_result,
)
from seam_rpc.utils.serialization import from_json, to_json


def test_error_code_table():
    assert ErrorCode.PARSE_ERROR == -32700
    assert ErrorCode.INVALID_REQUEST == -32600
    assert ErrorCode.METHOD_NOT_FOUND == -32601
    assert ErrorCode.INTERNAL_ERROR == -32603


@pytest.mark.parametrize("code, method, message", [
    (ErrorCode.PARSE_ERROR, None, "ParseError: invalid JSON received"),
    (ErrorCode.INVALID_REQUEST, None, "InvalidRequest: JSON sent is not a valid request object"),
    (ErrorCode.METHOD_NOT_FOUND, "yo", "MethodNotFound: 'yo' wasn't found"),
    (ErrorCode.INTERNAL_ERROR, "help", "InternalError: Internal Error when calling 'help'"),
])
def test_error_messages(code, method, message):
    error = error_from_code(code, method=method)
    assert error == {"code": int(code), "message": message}


def test_error_data_is_optional():
    error = error_from_code(ErrorCode.INTERNAL_ERROR, "boom", "help")
    assert list(error) == ["code", "message", "data"]
    assert error["data"] == "boom"


def test_wire_shapes():
    assert to_json(make_request(1, "help", {"lives": 1})) == '{"id":1,"method":"help","params":{"lives":1}}'
    assert to_json(make_request(2, "ping")) == '{"id":2,"method":"ping"}'
    assert to_json(make_notification("Game.levelUp", {"level": 2})) == '{"method":"Game.levelUp","params":{"level":2}}'
    assert to_json(make_notification("hello")) == '{"method":"hello"}'
    assert to_json(make_result(1, {"acknowledged": True})) == '{"id":1,"result":{"acknowledged":true}}'
    assert to_json(make_error(-1, error_from_code(ErrorCode.PARSE_ERROR))) == (
        '{"id":-1,"error":{"code":-32700,"message":"ParseError: invalid JSON received"}}'
    )


def test_non_ascii_text_is_kept():
    assert to_json(make_notification("say", "héllo")) == '{"method":"say","params":"héllo"}'


def test_from_json_accepts_bytes():
    assert from_json('{"id":1}'.encode("utf-8")) == {"id": 1}


def test_from_json_rejects_malformed_text():
    with pytest.raises(json.JSONDecodeError):
        from_json("{badJson:true}")
    with pytest.raises(TypeError):
        from_json(object())


@pytest.mark.parametrize("value, expected", [
    (1, True), (-1, True), (2.0, False), (1.5, False), (True, False), ("1", False), (None, False), ([1], False),
])
def test_is_request_id(value, expected):
    assert is_request_id(value) is expected


def test_message_error_from_object():
    error = MessageError({"code": 1234, "message": "Some error happened", "data": "custom data"})

    assert error.code == 1234
    assert error.message == "Some error happened"
    assert error.data == "custom data"
    assert str(error) == "Some error happened"


def test_message_error_from_non_object():
    error = MessageError("plain failure")

    assert error.code is None
    assert error.message == "plain failure"
