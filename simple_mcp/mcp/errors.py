"""JSON-RPC 2.0 error codes, error helpers and protocol exceptions."""

from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700  # Invalid JSON was received
INVALID_REQUEST = -32600  # The JSON sent is not a valid Request object
METHOD_NOT_FOUND = -32601  # The method does not exist / is not available
INVALID_PARAMS = -32602  # Invalid method parameter(s)
INTERNAL_ERROR = -32603  # Internal JSON-RPC error

# HTTP status returned alongside an error envelope
HTTP_STATUS = {
    PARSE_ERROR: 400,
    INVALID_REQUEST: 400,
    INVALID_PARAMS: 400,
    METHOD_NOT_FOUND: 200,
    INTERNAL_ERROR: 500,
}


def error_message(code: int) -> str:
    """Get the standard message for a JSON-RPC error code."""
    messages = {
        PARSE_ERROR: "Parse error",
        INVALID_REQUEST: "Invalid Request",
        METHOD_NOT_FOUND: "Method not found",
        INVALID_PARAMS: "Invalid params",
        INTERNAL_ERROR: "Internal error",
    }
    return messages.get(code, "Unknown error")


def make_error_data(code: int, message: str | None = None, data: Any = None) -> dict[str, Any]:
    """Create an error object for JSON-RPC response."""
    error: dict[str, Any] = {
        "code": code,
        "message": message or error_message(code),
    }
    if data is not None:
        error["data"] = data
    return error


def http_status_for(code: int) -> int:
    """HTTP status for an error envelope carrying ``code``."""
    return HTTP_STATUS.get(code, 500)


class McpError(Exception):
    """A protocol-level failure that maps onto a JSON-RPC error envelope."""

    code = INTERNAL_ERROR

    def __init__(self, message: str = "", data: Any = None) -> None:
        self.message = message or error_message(self.code)
        self.data = data
        super().__init__(self.message)

    def to_error_data(self) -> dict[str, Any]:
        return make_error_data(self.code, self.message, self.data)


class InvalidParamsError(McpError):
    """Method parameters are missing or malformed."""

    code = INVALID_PARAMS


class MethodNotFoundError(McpError):
    """No handler exists for the requested method."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class ToolNotFoundError(InvalidParamsError):
    """The requested tool is not registered."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' not found", data={"tool": tool_name})
