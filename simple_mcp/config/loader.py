"""Configuration loading from environment and YAML files."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from SIMPLE_MCP_* environment variables."""

    # Routing
    enabled: bool = True
    path: str = "simple-mcp"
    middleware: list[str] = ["request_id", "cors"]

    # Request logging channel
    logging_enabled: bool = True
    logging_channel: str = "simple-mcp"

    # structlog output
    log_level: str = "INFO"
    log_format: str = "json"

    # Server info
    server_name: str = "simple-mcp"
    server_version: str = "1.0.0"
    server_description: str = "A simple MCP server"

    # Tool providers and manifest extras
    providers: list[str] = ["builtin"]
    manifest_config: str = ""

    # Host and port
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_prefix="SIMPLE_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def route_prefix(self) -> str:
        """URI prefix for MCP routes: '/<path>', or '' to mount at the root."""
        path = self.path.strip("/")
        return f"/{path}" if path else ""


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


DEFAULT_MANIFEST_CONFIG: dict[str, Any] = {
    "resources": {
        "status": {
            "uri": "simple-mcp://status",
            "name": "Server Status",
            "description": "Current status and health of the Simple MCP server",
            "mimeType": "application/json",
        },
    },
    "prompts": {
        "test-server": {
            "name": "test-server",
            "description": "Test the Simple MCP server with ping and echo",
            "arguments": [],
        },
    },
    "metadata": {
        "author": "Skylence",
        "license": "MIT",
        "tags": ["mcp", "model-context-protocol", "json-rpc", "ai", "tools"],
    },
}


def load_manifest_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load manifest resources, prompts and metadata from a YAML file.

    Args:
        config_path: Path to the config file. If None, uses default location.

    Returns:
        Dictionary with ``resources``, ``prompts`` and ``metadata`` keys.
        Keys missing from the file take their built-in defaults.
    """
    if not config_path:
        possible_paths = [
            Path("config/simple-mcp.yaml"),
            Path(__file__).parent.parent.parent / "config" / "simple-mcp.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = path
                break
        else:
            return dict(DEFAULT_MANIFEST_CONFIG)

    config_path = Path(config_path)
    if not config_path.exists():
        return dict(DEFAULT_MANIFEST_CONFIG)

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return {key: config.get(key, default) for key, default in DEFAULT_MANIFEST_CONFIG.items()}
