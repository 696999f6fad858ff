"""Tests for MCP JSON-RPC protocol handling over HTTP."""

import json

import pytest
from fastapi.testclient import TestClient

from simple_mcp.mcp.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)


class TestJsonRpcParsing:
    """Tests for JSON-RPC message validation."""

    def test_invalid_json_returns_parse_error(self, client: TestClient):
        """Test that invalid JSON returns parse error."""
        response = client.post(
            "/",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["jsonrpc"] == "2.0"
        assert data["id"] is None
        assert data["error"]["code"] == PARSE_ERROR
        assert "invalid json" in data["error"]["message"].lower()

    def test_wrong_content_type_returns_parse_error(self, client: TestClient):
        response = client.post(
            "/",
            content='{"jsonrpc": "2.0", "id": 1, "method": "tools/list"}',
            headers={"Content-Type": "text/plain"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == {
            "code": PARSE_ERROR,
            "message": "Content-Type must be application/json",
        }

    def test_content_type_with_charset_is_accepted(self, client: TestClient):
        response = client.post(
            "/",
            content='{"jsonrpc": "2.0", "id": 1, "method": "tools/list"}',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
        assert response.status_code == 200
        assert "result" in response.json()

    def test_empty_body_returns_invalid_request(self, client: TestClient):
        response = client.post(
            "/",
            content="",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["error"]["code"] == INVALID_REQUEST
        assert data["error"]["message"] == "Empty JSON body"

    def test_array_body_returns_invalid_request(self, client: TestClient):
        response = client.post("/", json=[{"jsonrpc": "2.0", "id": 1, "method": "tools/list"}])
        assert response.status_code == 400

        data = response.json()
        assert data["error"]["code"] == INVALID_REQUEST
        assert data["error"]["message"] == "JSON body must be an object"

    def test_missing_jsonrpc_field_returns_invalid_request(self, client: TestClient):
        """Test that missing jsonrpc field returns invalid request."""
        response = client.post(
            "/",
            json={"id": 1, "method": "test"},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["error"]["code"] == INVALID_REQUEST
        assert data["id"] == 1

    @pytest.mark.parametrize("version", ["1.0", 2.0, None])
    def test_wrong_jsonrpc_version_returns_invalid_request(self, client: TestClient, version):
        """Test that wrong jsonrpc version returns invalid request."""
        response = client.post(
            "/",
            json={"jsonrpc": version, "id": "abc", "method": "test"},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["error"]["code"] == INVALID_REQUEST
        assert data["error"]["message"] == "Invalid JSON-RPC version. Must be '2.0'"
        assert data["id"] == "abc"

    def test_wrong_version_without_id_echoes_null(self, client: TestClient):
        response = client.post("/", json={"jsonrpc": "1.0", "method": "tools/list"})
        data = response.json()
        assert data["error"]["code"] == INVALID_REQUEST
        assert data["id"] is None

    @pytest.mark.parametrize("method", [None, "", 42])
    def test_bad_method_returns_invalid_request(self, client: TestClient, method):
        body = {"jsonrpc": "2.0", "id": 7}
        if method is not None:
            body["method"] = method
        response = client.post("/", json=body)
        assert response.status_code == 400

        data = response.json()
        assert data["error"]["code"] == INVALID_REQUEST
        assert data["error"]["message"] == "Method is missing or not a string"
        assert data["id"] == 7

    def test_object_id_returns_invalid_request(self, client: TestClient):
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": {"nested": 1}, "method": "tools/list"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == INVALID_REQUEST


class TestMcpMethods:
    """Tests for MCP protocol methods."""

    def test_unknown_method_returns_not_found(self, client: TestClient):
        """Test that unknown method returns method not found."""
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": 3, "method": "unknown/thing"},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["id"] == 3
        assert data["error"]["code"] == METHOD_NOT_FOUND
        assert data["error"]["message"] == "Method not found: unknown/thing"

    @pytest.mark.parametrize("method", ["initialize", "mcp.manifest", "mcp.getManifest"])
    def test_manifest_methods_return_manifest(
        self, client: TestClient, sample_jsonrpc_request, method
    ):
        """Test that initialize and its aliases return the manifest."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                method,
                {
                    "protocolVersion": "2024-11-05",
                    "capabilities": {},
                    "clientInfo": {"name": "test", "version": "1.0"},
                },
            ),
        )
        assert response.status_code == 200

        result = response.json()["result"]
        assert result["protocolVersion"] == "2024-11-05"
        assert result["serverInfo"]["name"] == "simple-mcp"
        assert set(result["capabilities"]) == {"tools", "resources", "prompts"}
        assert set(result["capabilities"]["tools"]) == {"ping", "echo"}
        assert "metadata" in result

    def test_tools_list_returns_tools(self, client: TestClient, sample_jsonrpc_request):
        """Test that tools/list returns available tools."""
        response = client.post("/", json=sample_jsonrpc_request("tools/list"))
        assert response.status_code == 200

        tools = response.json()["result"]["tools"]
        assert isinstance(tools, list)

        tool_names = [t["name"] for t in tools]
        assert tool_names == ["mcp__simple-mcp__ping", "mcp__simple-mcp__echo"]
        assert len(set(tool_names)) == len(tool_names)

    def test_tools_list_matches_manifest(self, client: TestClient, sample_jsonrpc_request):
        listed = client.post("/", json=sample_jsonrpc_request("tools/list")).json()
        manifest = client.post("/", json=sample_jsonrpc_request("initialize")).json()

        by_name = manifest["result"]["capabilities"]["tools"]
        assert list(by_name.values()) == listed["result"]["tools"]

    def test_tools_list_tool_has_required_fields(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that listed tools have all required fields."""
        response = client.post("/", json=sample_jsonrpc_request("tools/list"))

        for tool in response.json()["result"]["tools"]:
            assert "name" in tool
            assert "description" in tool
            assert isinstance(tool["inputSchema"], dict)

    def test_tools_call_ping(self, client: TestClient, sample_jsonrpc_request):
        """Test calling the ping tool."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/call", {"name": "ping", "arguments": {}}),
        )
        assert response.status_code == 200

        result = response.json()["result"]
        assert result["isError"] is False
        assert "pong" in result["content"][0]["text"].lower()
        assert result["data"]["status"] == "ok"

    def test_tools_call_echo(self, client: TestClient):
        """Test calling the echo tool."""
        response = client.post(
            "/",
            json={
                "jsonrpc": "2.0",
                "id": 1,
                "method": "tools/call",
                "params": {"name": "echo", "arguments": {"message": "hi"}},
            },
        )
        assert response.status_code == 200

        data = response.json()
        assert data["id"] == 1
        assert data["result"]["content"][0] == {"type": "text", "text": "Echo: hi"}
        assert data["result"]["data"]["length"] == 2

    def test_tools_call_accepts_qualified_name(self, client: TestClient, sample_jsonrpc_request):
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                "tools/call",
                {"name": "mcp__simple-mcp__echo", "arguments": {"message": "hi"}},
            ),
        )
        assert response.json()["result"]["content"][0]["text"] == "Echo: hi"

    def test_tools_call_echo_missing_message_is_tool_error(self, client: TestClient):
        response = client.post(
            "/",
            json={
                "jsonrpc": "2.0",
                "id": 2,
                "method": "tools/call",
                "params": {"name": "echo", "arguments": {}},
            },
        )
        assert response.status_code == 200

        data = response.json()
        assert data["id"] == 2
        assert "error" not in data
        assert data["result"]["isError"] is True
        assert "required" in data["result"]["content"][0]["text"]

    def test_tools_call_is_repeatable(self, client: TestClient, sample_jsonrpc_request):
        request = sample_jsonrpc_request(
            "tools/call", {"name": "echo", "arguments": {"message": "same"}}
        )
        first = client.post("/", json=request).json()["result"]
        second = client.post("/", json=request).json()["result"]
        assert first["content"][0]["text"] == second["content"][0]["text"]

    def test_tools_call_unknown_tool(self, client: TestClient, sample_jsonrpc_request):
        """Test calling an unknown tool is a client error."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                "tools/call", {"name": "unknown_tool", "arguments": {}}, id=9
            ),
        )
        assert response.status_code == 400

        data = response.json()
        assert data["id"] == 9
        assert data["error"]["code"] == INVALID_PARAMS
        assert "not found" in data["error"]["message"].lower()
        assert data["error"]["data"] == {"tool": "unknown_tool"}

    @pytest.mark.parametrize(
        "params",
        [
            {"arguments": {}},
            {"name": "", "arguments": {}},
            {"name": "echo", "arguments": ["hi"]},
            ["echo"],
        ],
    )
    def test_tools_call_bad_params(self, client: TestClient, params):
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": 5, "method": "tools/call", "params": params},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["id"] == 5
        assert data["error"]["code"] == INVALID_PARAMS

    def test_tools_call_missing_arguments_defaults_to_empty(self, client: TestClient):
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": 6, "method": "tools/call", "params": {"name": "ping"}},
        )
        assert response.status_code == 200
        assert response.json()["result"]["isError"] is False

    def test_tool_exception_returns_internal_error(self, app, client: TestClient, sample_jsonrpc_request):
        tool = app.state.mcp_server.registry.get("echo")

        async def broken(arguments):
            raise RuntimeError("backend exploded")

        tool.execute = broken

        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/call", {"name": "echo", "arguments": {}}, id=11),
        )
        assert response.status_code == 500

        data = response.json()
        assert data["id"] == 11
        assert data["error"]["code"] == INTERNAL_ERROR
        assert data["error"]["message"] == "backend exploded"

    def test_notification_returns_no_content(self, client: TestClient):
        """Test that the initialized notification returns 204 with no body."""
        response = client.post(
            "/",
            json={
                "jsonrpc": "2.0",
                "method": "notifications/initialized",
                # No id = notification
            },
        )
        assert response.status_code == 204
        assert response.content == b""

    def test_initialized_with_id_is_not_a_notification(self, client: TestClient):
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": 4, "method": "notifications/initialized"},
        )
        assert response.status_code == 200
        assert response.json()["error"]["code"] == METHOD_NOT_FOUND


class TestResponseFormat:
    """Tests for JSON-RPC response format compliance."""

    def test_response_has_jsonrpc_field(self, client: TestClient, sample_jsonrpc_request):
        response = client.post("/", json=sample_jsonrpc_request("tools/list"))
        assert response.json()["jsonrpc"] == "2.0"

    @pytest.mark.parametrize("request_id", [42, "req-42", 4.5])
    def test_response_has_matching_id(self, client: TestClient, sample_jsonrpc_request, request_id):
        """Test that response id matches request id."""
        response = client.post("/", json=sample_jsonrpc_request("tools/list", id=request_id))
        assert response.json()["id"] == request_id

    def test_success_response_has_only_result(self, client: TestClient, sample_jsonrpc_request):
        response = client.post("/", json=sample_jsonrpc_request("tools/list"))
        data = response.json()
        assert "result" in data
        assert "error" not in data

    def test_error_response_has_only_error(self, client: TestClient, sample_jsonrpc_request):
        response = client.post("/", json=sample_jsonrpc_request("unknown/method"))
        data = response.json()
        assert "result" not in data
        assert "data" not in data["error"]
        assert data["error"]["code"] is not None
        assert data["error"]["message"] is not None


@pytest.mark.asyncio
async def test_async_client_round_trip(async_client):
    response = await async_client.post(
        "/",
        content=json.dumps({"jsonrpc": "2.0", "id": 1, "method": "tools/list"}),
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    assert len(response.json()["result"]["tools"]) == 2
