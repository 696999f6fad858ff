"""Built-in provider tools: a health check and an echo."""

from typing import Any

from simple_mcp.mcp.models import ToolResult
from simple_mcp.mcp.registry import ToolRegistry
from simple_mcp.tools.base import TOOL_NAMESPACE, BaseTool, utc_timestamp


class PingTool(BaseTool):
    """Health check with no arguments."""

    short_name = "ping"
    description = "Simple ping tool to check if the MCP server is responding"
    input_schema = {
        "type": "object",
        "properties": {},
        "required": [],
    }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        return self.format_response(
            "Pong! MCP server is up and running.",
            {
                "status": "ok",
                "timestamp": utc_timestamp(),
                "server": TOOL_NAMESPACE,
            },
        )


class EchoTool(BaseTool):
    """Echo a message back with its length."""

    short_name = "echo"
    description = "Echo back any message you send"
    input_schema = {
        "type": "object",
        "properties": {
            "message": {
                "type": "string",
                "description": "The message to echo back",
            },
        },
        "required": ["message"],
    }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        message = arguments.get("message")
        if message is None:
            return self.format_error('The "message" parameter is required')
        if not isinstance(message, str):
            return self.format_error('The "message" parameter must be a string')

        return self.format_response(
            f"Echo: {message}",
            {
                "original": message,
                "length": len(message),
                "timestamp": utc_timestamp(),
            },
        )


def register_tools(registry: ToolRegistry) -> None:
    """Register all built-in tools with the registry."""
    registry.register(PingTool())
    registry.register(EchoTool())
