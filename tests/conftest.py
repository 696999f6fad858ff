"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport

from simple_mcp.config.loader import Settings
from simple_mcp.main import create_app
from simple_mcp.mcp.handlers import MCPHandlers
from simple_mcp.mcp.registry import ToolRegistry
from simple_mcp.mcp.server import build_server
from simple_mcp.tools.builtin.tools import register_tools


@pytest.fixture
def settings():
    """Settings mounting the MCP routes at the root with request logging off."""
    return Settings(path="", logging_enabled=False)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Synchronous test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
async def async_client(app):
    """Async test client for FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def registry():
    """A registry holding the built-in tools."""
    registry = ToolRegistry()
    register_tools(registry)
    return registry


@pytest.fixture
def handlers(settings):
    return MCPHandlers(build_server(settings))


@pytest.fixture
def sample_jsonrpc_request():
    """Sample JSON-RPC request factory."""
    def _make_request(method: str, params: dict = None, id: int = 1):
        return {
            "jsonrpc": "2.0",
            "id": id,
            "method": method,
            "params": params or {},
        }
    return _make_request
