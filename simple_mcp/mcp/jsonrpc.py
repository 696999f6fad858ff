"""JSON-RPC 2.0 request validation and message processing."""

import json
import logging
from typing import Any

from simple_mcp.mcp import responses
from simple_mcp.mcp.errors import INVALID_REQUEST, PARSE_ERROR, http_status_for
from simple_mcp.mcp.handlers import MCPHandlers
from simple_mcp.mcp.models import JsonRpcRequest, JsonRpcResponse, RequestId

logger = logging.getLogger(__name__)

# HTTP status for a notification that was accepted
NO_CONTENT = 204


def is_json_content_type(content_type: str | None) -> bool:
    """True for application/json and structured +json media types."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or (
        media_type.startswith("application/") and media_type.endswith("+json")
    )


def is_valid_id(value: Any) -> bool:
    """Request ids are strings, numbers or null."""
    if isinstance(value, bool):
        return False
    return value is None or isinstance(value, (str, int, float))


def extract_id(data: Any) -> RequestId:
    """Best-effort id for echoing on error envelopes."""
    if isinstance(data, dict):
        value = data.get("id")
        if is_valid_id(value):
            return value
    return None


def validate_request(
    raw_data: str | bytes, content_type: str | None
) -> tuple[JsonRpcRequest | None, JsonRpcResponse | None]:
    """
    Validate a raw HTTP body as a JSON-RPC 2.0 request.

    Checks run in order and the first failure wins.

    Returns (request, error) tuple. One will be None.
    """
    if not is_json_content_type(content_type):
        return None, responses.error("Content-Type must be application/json", PARSE_ERROR)

    if isinstance(raw_data, bytes):
        try:
            raw_data = raw_data.decode("utf-8")
        except UnicodeDecodeError as e:
            return None, responses.error(f"Invalid JSON in request body: {e}", PARSE_ERROR)

    if not raw_data.strip():
        return None, responses.error("Empty JSON body", INVALID_REQUEST)

    try:
        data = json.loads(raw_data)
    except json.JSONDecodeError as e:
        return None, responses.error(f"Invalid JSON in request body: {e}", PARSE_ERROR)

    if not isinstance(data, dict):
        return None, responses.error("JSON body must be an object", INVALID_REQUEST)

    request_id = extract_id(data)

    if data.get("jsonrpc") != "2.0":
        return None, responses.error(
            "Invalid JSON-RPC version. Must be '2.0'", INVALID_REQUEST, request_id
        )

    method = data.get("method")
    if not isinstance(method, str) or not method:
        return None, responses.error(
            "Method is missing or not a string", INVALID_REQUEST, request_id
        )

    if not is_valid_id(data.get("id")):
        return None, responses.error("Invalid request id", INVALID_REQUEST)

    params = data.get("params")
    request = JsonRpcRequest(
        jsonrpc="2.0",
        id=data.get("id"),
        method=method,
        params={} if params is None else params,
    )
    return request, None


class JsonRpcProcessor:
    """Process JSON-RPC 2.0 messages."""

    def __init__(self, handlers: MCPHandlers):
        self.handlers = handlers

    async def handle_message(
        self,
        raw_data: str | bytes,
        content_type: str | None,
        expected_method: str | None = None,
    ) -> JsonRpcResponse | None:
        """
        Handle a raw JSON-RPC message end-to-end.

        ``expected_method`` restricts the endpoint to a single method.
        Returns a response or None for the initialized notification.
        """
        request, error = validate_request(raw_data, content_type)
        if error is not None:
            logger.info(f"Rejected JSON-RPC request: {error.error.message}")
            return error

        if expected_method is not None and request.method != expected_method:
            return responses.error(
                f"Method must be '{expected_method}' on this endpoint",
                INVALID_REQUEST,
                request.id,
            )

        return await self.handlers.dispatch(request)

    @staticmethod
    def status_code(response: JsonRpcResponse | None) -> int:
        """HTTP status code to send with ``response``."""
        if response is None:
            return NO_CONTENT
        if response.error is not None:
            return http_status_for(response.error.code)
        return 200
