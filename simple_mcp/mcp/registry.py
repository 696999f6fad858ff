"""Tool registry for managing MCP tools."""

import importlib
import logging
import re
from typing import TYPE_CHECKING

from simple_mcp.mcp.models import ToolDescriptor

if TYPE_CHECKING:
    from simple_mcp.tools.base import BaseTool

logger = logging.getLogger(__name__)

# Short names double as URL path segments and JSON keys
SHORT_NAME_PATTERN = re.compile(r"[a-zA-Z0-9_]+")


class ToolRegistry:
    """
    Registry of tools keyed by short name, with plugin-style provider loading.

    Populated once at startup and read-only afterwards, so request handlers
    can share a single instance without locking.
    """

    def __init__(self) -> None:
        self._tools: dict[str, "BaseTool"] = {}
        self._providers: set[str] = set()

    def register(self, tool: "BaseTool") -> bool:
        """
        Register a tool, replacing any earlier tool with the same short name.

        Tools whose short name is not made of letters, digits and underscores
        are rejected. Returns whether the tool was registered.
        """
        name = tool.short_name
        if not isinstance(name, str) or not SHORT_NAME_PATTERN.fullmatch(name):
            logger.warning(f"Rejected tool with invalid short name: {name!r}")
            return False
        if name in self._tools:
            logger.warning(f"Tool '{name}' already registered, overwriting")
        self._tools[name] = tool
        logger.info(f"Registered tool: {name}")
        return True

    def get(self, name: str) -> "BaseTool | None":
        """Get a tool by short name."""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def list_descriptors(self) -> list[ToolDescriptor]:
        """Tool schemas in registration order (the tools/list view)."""
        return [tool.schema() for tool in self._tools.values()]

    def descriptors_by_name(self) -> dict[str, ToolDescriptor]:
        """Tool schemas keyed by short name (the manifest view)."""
        return {name: tool.schema() for name, tool in self._tools.items()}

    def load_provider(self, provider_name: str) -> bool:
        """
        Load a provider module and register its tools.

        Providers live in simple_mcp/tools/<provider_name>/tools.py
        and expose a register_tools(registry) function.
        """
        if provider_name in self._providers:
            logger.debug(f"Provider '{provider_name}' already loaded")
            return True

        module_path = f"simple_mcp.tools.{provider_name}.tools"
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            logger.warning(f"Could not import provider '{provider_name}': {e}")
            return False

        if not hasattr(module, "register_tools"):
            logger.warning(f"Provider '{provider_name}' has no register_tools function")
            return False

        module.register_tools(self)
        self._providers.add(provider_name)
        logger.info(f"Loaded provider: {provider_name}")
        return True

    def load_providers(self, provider_names: list[str]) -> dict[str, bool]:
        """Load multiple providers, returning success status for each."""
        results = {}
        for name in provider_names:
            results[name] = self.load_provider(name)
        return results

    @property
    def tool_count(self) -> int:
        """Return the number of registered tools."""
        return len(self._tools)

    @property
    def provider_count(self) -> int:
        """Return the number of loaded providers."""
        return len(self._providers)
