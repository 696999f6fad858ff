"""MCP (Model Context Protocol) implementation with JSON-RPC 2.0."""

from simple_mcp.mcp.models import (
    JsonRpcRequest,
    JsonRpcResponse,
    JsonRpcError,
    Manifest,
    TextContent,
    ToolDescriptor,
    ToolResult,
)
from simple_mcp.mcp.registry import ToolRegistry
from simple_mcp.mcp.errors import (
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
    McpError,
    InvalidParamsError,
    MethodNotFoundError,
    ToolNotFoundError,
)

__all__ = [
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "Manifest",
    "TextContent",
    "ToolDescriptor",
    "ToolResult",
    "ToolRegistry",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "McpError",
    "InvalidParamsError",
    "MethodNotFoundError",
    "ToolNotFoundError",
]
