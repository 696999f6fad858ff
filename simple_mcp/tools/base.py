"""Base tool class shared by every tool implementation."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from simple_mcp.mcp.models import TextContent, ToolDescriptor, ToolResult

# Namespace used in fully-qualified tool names: mcp__<namespace>__<short name>
TOOL_NAMESPACE = "simple-mcp"
TOOL_NAME_PREFIX = f"mcp__{TOOL_NAMESPACE}__"


def qualified_name(short_name: str) -> str:
    """Return the fully-qualified name for a tool short name."""
    return f"{TOOL_NAME_PREFIX}{short_name}"


def strip_tool_prefix(name: str) -> str:
    """Reduce a fully-qualified tool name to its registry key."""
    return name.removeprefix(TOOL_NAME_PREFIX)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseTool(ABC):
    """
    Base class for tool implementations.

    Subclasses provide a short name (letters, digits and underscores only),
    a static schema and an ``execute`` coroutine. Bad arguments are reported
    through ``format_error`` rather than raised, so they reach the client as
    a successful call carrying an error-shaped result.
    """

    description: str = ""
    input_schema: dict[str, Any] | None = None

    @property
    @abstractmethod
    def short_name(self) -> str:
        """Stable identifier used as the registry key."""

    @property
    def name(self) -> str:
        return qualified_name(self.short_name)

    def schema(self) -> ToolDescriptor:
        """Static description of the tool for discovery."""
        if self.input_schema is None:
            return ToolDescriptor(name=self.name, description=self.description)
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )

    @abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """Execute the tool with the given arguments."""

    @staticmethod
    def format_response(text: str, data: Any = None) -> ToolResult:
        """Format a successful result."""
        return ToolResult(content=[TextContent(text=text)], data=data)

    @staticmethod
    def format_error(message: str) -> ToolResult:
        """Format a tool-level error result."""
        return ToolResult(content=[TextContent(text=f"Error: {message}")], isError=True)
