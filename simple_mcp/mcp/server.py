"""MCP server state: the tool registry plus the manifest built from it."""

import logging
from typing import Any

from simple_mcp.config.loader import Settings, load_manifest_config
from simple_mcp.mcp.models import Capabilities, Manifest, ServerInfo
from simple_mcp.mcp.registry import ToolRegistry

logger = logging.getLogger(__name__)

# MCP protocol version we support
PROTOCOL_VERSION = "2024-11-05"


class McpServer:
    """Read-only server context shared by every request."""

    def __init__(
        self,
        registry: ToolRegistry,
        server_info: ServerInfo,
        resources: dict[str, dict[str, Any]] | None = None,
        prompts: dict[str, dict[str, Any]] | None = None,
        metadata: dict[str, Any] | None = None,
    ):
        self.registry = registry
        self.server_info = server_info
        self.resources = resources or {}
        self.prompts = prompts or {}
        self.metadata = metadata or {}

    def manifest(self) -> Manifest:
        """Build the manifest from the current registry contents."""
        return Manifest(
            protocolVersion=PROTOCOL_VERSION,
            serverInfo=self.server_info,
            capabilities=Capabilities(
                tools=self.registry.descriptors_by_name(),
                resources=self.resources,
                prompts=self.prompts,
            ),
            metadata=self.metadata,
        )


def build_server(settings: Settings) -> McpServer:
    """Create the registry, load the configured providers and wrap it in a server."""
    registry = ToolRegistry()
    results = registry.load_providers(settings.providers)
    for provider, success in results.items():
        if not success:
            logger.warning(f"Failed to load provider: {provider}")

    extras = load_manifest_config(settings.manifest_config or None)
    return McpServer(
        registry=registry,
        server_info=ServerInfo(
            name=settings.server_name,
            version=settings.server_version,
            description=settings.server_description,
        ),
        resources=extras["resources"],
        prompts=extras["prompts"],
        metadata=extras["metadata"],
    )
