"""Minimal MCP server exposing tools over JSON-RPC 2.0 and HTTP."""

__version__ = "1.0.0"
