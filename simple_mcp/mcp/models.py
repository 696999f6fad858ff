"""Pydantic models for MCP JSON-RPC 2.0 protocol."""

from typing import Any, Literal
from pydantic import BaseModel, Field


# =============================================================================
# JSON-RPC 2.0 Base Models
# =============================================================================

RequestId = int | float | str | None


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request object."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None  # None for notifications
    method: str = Field(..., min_length=1)
    params: Any = Field(default_factory=dict)

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response object."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None
    result: Any = None
    error: JsonRpcError | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        """Custom serialization: exactly one of result/error, data only when set."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        else:
            data["result"] = self.result
        data["id"] = self.id
        return data


# =============================================================================
# MCP Content Types
# =============================================================================


class TextContent(BaseModel):
    """Text content returned by tools."""

    type: Literal["text", "error"] = "text"
    text: str


class ToolResult(BaseModel):
    """Uniform result of a tool execution, successful or not."""

    content: list[TextContent]
    data: Any = None
    isError: bool = False

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# =============================================================================
# MCP Tool Models
# =============================================================================


def empty_input_schema() -> dict[str, Any]:
    return {"type": "object", "properties": {}, "required": []}


class ToolDescriptor(BaseModel):
    """MCP tool definition."""

    name: str = Field(..., description="Fully-qualified tool name")
    description: str = Field(..., description="Human-readable description")
    inputSchema: dict[str, Any] = Field(
        default_factory=empty_input_schema, description="JSON Schema for tool input"
    )


# =============================================================================
# MCP Protocol Models
# =============================================================================


class ServerInfo(BaseModel):
    """Server information returned in the manifest."""

    name: str
    version: str
    description: str = ""


class Capabilities(BaseModel):
    """Server capabilities, keyed by short name."""

    tools: dict[str, ToolDescriptor] = Field(default_factory=dict)
    resources: dict[str, dict[str, Any]] = Field(default_factory=dict)
    prompts: dict[str, dict[str, Any]] = Field(default_factory=dict)


class Manifest(BaseModel):
    """Discovery document returned by initialize and the manifest methods."""

    protocolVersion: str
    serverInfo: ServerInfo
    capabilities: Capabilities
    metadata: dict[str, Any] = Field(default_factory=dict)


class ToolsListResult(BaseModel):
    """Result of tools/list request."""

    tools: list[ToolDescriptor]
