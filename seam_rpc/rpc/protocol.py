"""
JSON-RPC 2.0 message model

Builds the three wire shapes (Request, Response, Notification) and holds the
fixed error-code table. Optional fields are left out of the message instead
of being sent as null, so the JSON text matches other peers byte for byte.
"""

from enum import IntEnum
from typing import Any, Dict, Optional


class ErrorCode(IntEnum):
    """JSON-RPC error codes understood by the engine"""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


# Templates are part of the wire contract; {method} is the offending method name
ERROR_MESSAGES = {
    ErrorCode.PARSE_ERROR: "ParseError: invalid JSON received",
    ErrorCode.INVALID_REQUEST: "InvalidRequest: JSON sent is not a valid request object",
    ErrorCode.METHOD_NOT_FOUND: "MethodNotFound: '{method}' wasn't found",
    ErrorCode.INTERNAL_ERROR: "InternalError: Internal Error when calling '{method}'",
}

# id used in error responses when the request id cannot be recovered
UNKNOWN_ID = -1


def error_from_code(code: ErrorCode, data: Any = None, method: Optional[str] = None) -> Dict[str, Any]:
    """Build a JSON-RPC error object from the fixed code table

    Args:
        code: Error code
        data: Auxiliary context such as a handler failure's message
        method: Method name embedded in the message template

    Returns:
        Dict: Error object with code, message and (when given) data
    """
    code = ErrorCode(code)
    error = {
        "code": int(code),
        "message": ERROR_MESSAGES[code].format(method=method),
    }
    if data is not None:
        error["data"] = data
    return error


def make_request(request_id: int, method: str, params: Any = None) -> Dict[str, Any]:
    message = {"id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


def make_notification(method: str, params: Any = None) -> Dict[str, Any]:
    message = {"method": method}
    if params is not None:
        message["params"] = params
    return message


def make_result(request_id: int, result: Any) -> Dict[str, Any]:
    return {"id": request_id, "result": result}


def make_error(request_id: int, error: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": request_id, "error": error}


def is_request_id(value: Any) -> bool:
    """True for integer ids; bool is an int subclass but never an id."""
    return isinstance(value, int) and not isinstance(value, bool)
