"""MCP method handlers and dispatch for validated JSON-RPC requests."""

import logging
from typing import Any

from simple_mcp.mcp import responses
from simple_mcp.mcp.errors import (
    INTERNAL_ERROR,
    InvalidParamsError,
    McpError,
    MethodNotFoundError,
    ToolNotFoundError,
)
from simple_mcp.mcp.models import JsonRpcRequest, JsonRpcResponse, ToolsListResult
from simple_mcp.mcp.server import McpServer
from simple_mcp.tools.base import strip_tool_prefix
from simple_mcp.utils.logging import ChannelLogger

logger = logging.getLogger(__name__)

INITIALIZED_NOTIFICATION = "notifications/initialized"
MANIFEST_METHODS = ("initialize", "mcp.manifest", "mcp.getManifest")


class MCPHandlers:
    """Handlers for MCP protocol methods."""

    def __init__(self, server: McpServer, log: ChannelLogger | None = None):
        self.server = server
        self.registry = server.registry
        self.log = log or ChannelLogger(enabled=False)

    async def handle_manifest(self, params: Any) -> dict[str, Any]:
        """Handle initialize and the manifest aliases."""
        return self.server.manifest().model_dump()

    async def handle_tools_list(self, params: Any) -> dict[str, Any]:
        """Handle the tools/list request."""
        result = ToolsListResult(tools=self.registry.list_descriptors())
        return result.model_dump()

    async def handle_tools_call(self, params: Any) -> Any:
        """Handle the tools/call request, returning the tool's raw result."""
        if not isinstance(params, dict):
            raise InvalidParamsError("Params must be an object")

        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("Tool name is required")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        elif not isinstance(arguments, dict):
            raise InvalidParamsError("Tool arguments must be an object")

        return await self.execute_tool(strip_tool_prefix(name), arguments)

    async def execute_tool(self, short_name: str, arguments: dict[str, Any]) -> Any:
        """Look up a tool by short name and run it; raises ToolNotFoundError."""
        tool = self.registry.get(short_name)
        if tool is None:
            raise ToolNotFoundError(short_name)

        logger.info(f"Calling tool: {short_name}")
        return await tool.execute(arguments)

    async def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse | None:
        """
        Route a validated request to its handler and build the response.

        Returns None for the initialized notification, which gets no body.
        Every failure is converted into an error envelope carrying the
        request id.
        """
        method = request.method

        if method == INITIALIZED_NOTIFICATION and request.is_notification:
            self.log.info("MCP notification: Client initialized")
            return None

        self.log.info("MCP request received", method=method, id=request.id)

        try:
            if method in MANIFEST_METHODS:
                response = responses.success(await self.handle_manifest(request.params), request.id)
            elif method == "tools/list":
                response = responses.success(await self.handle_tools_list(request.params), request.id)
            elif method == "tools/call":
                response = responses.tool_response(
                    await self.handle_tools_call(request.params), request.id
                )
            else:
                raise MethodNotFoundError(method)
        except McpError as e:
            self.log.warning("MCP request rejected", method=method, code=e.code, error=e.message)
            return responses.error(e.message, e.code, request.id, e.data)
        except Exception as e:
            logger.exception(f"Error handling method {method}")
            self.log.error("MCP request failed", method=method, error=str(e))
            return responses.error(str(e) or type(e).__name__, INTERNAL_ERROR, request.id)

        self.log.info("MCP request completed", method=method)
        return response
