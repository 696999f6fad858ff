"""Configuration loading and management."""

from simple_mcp.config.loader import Settings, get_settings, load_manifest_config

__all__ = ["Settings", "get_settings", "load_manifest_config"]
