"""Builders for JSON-RPC success, error and MCP tool-result envelopes."""

import json
from typing import Any

from simple_mcp.mcp.errors import INTERNAL_ERROR
from simple_mcp.mcp.models import (
    JsonRpcError,
    JsonRpcResponse,
    RequestId,
    ToolResult,
)


def success(result: Any, id: RequestId = None) -> JsonRpcResponse:
    """Create a successful JSON-RPC response."""
    return JsonRpcResponse(id=id, result=result)


def error(
    message: str,
    code: int = INTERNAL_ERROR,
    id: RequestId = None,
    data: Any = None,
) -> JsonRpcResponse:
    """Create an error JSON-RPC response."""
    return JsonRpcResponse(
        id=id,
        error=JsonRpcError(code=code, message=message, data=data),
    )


def as_tool_result(content: Any) -> dict[str, Any]:
    """
    Coerce a tool's return value into an MCP ``{"content": [...]}`` payload.

    A ``ToolResult`` or a mapping that already carries a ``content`` list is
    passed through; anything else becomes a single text item, with structured
    data pretty-printed as JSON.
    """
    if isinstance(content, ToolResult):
        return content.to_payload()
    if isinstance(content, dict) and isinstance(content.get("content"), list):
        return content

    if isinstance(content, str):
        text = content
    else:
        text = json.dumps(content, indent=2, default=str)
    return {"content": [{"type": "text", "text": text}]}


def tool_response(content: Any, id: RequestId = None) -> JsonRpcResponse:
    """Wrap a tool result as the ``result`` of a success envelope."""
    return success(as_tool_result(content), id)
