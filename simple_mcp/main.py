"""FastAPI MCP Server - Main application entrypoint."""

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from simple_mcp.config.loader import Settings, get_settings
from simple_mcp.mcp import responses
from simple_mcp.mcp.errors import ToolNotFoundError
from simple_mcp.mcp.handlers import MCPHandlers
from simple_mcp.mcp.jsonrpc import JsonRpcProcessor
from simple_mcp.mcp.registry import SHORT_NAME_PATTERN
from simple_mcp.mcp.server import McpServer, build_server
from simple_mcp.utils.logging import ChannelLogger, get_logger, set_request_id, setup_logging

logger = logging.getLogger(__name__)



# =============================================================================
# Middleware
# =============================================================================


async def add_request_id_middleware(request: Request, call_next):
    """Add request ID to all requests."""
    request_id = set_request_id(request.headers.get("X-Request-ID") or None)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def apply_middleware(app: FastAPI, names: list[str]) -> None:
    """Apply the configured middleware, first name outermost."""
    # Starlette runs the last added middleware first, so add in reverse
    for name in reversed(names):
        if name == "request_id":
            app.middleware("http")(add_request_id_middleware)
        elif name == "cors":
            app.add_middleware(
                CORSMiddleware,
                allow_origins=["*"],  # Allow all origins for MCP compatibility
                allow_methods=["*"],
                allow_headers=["*"],
                expose_headers=["*"],
            )
        else:
            logger.warning(f"Unknown middleware '{name}', skipping")


# =============================================================================
# MCP Endpoints
# =============================================================================


def get_processor(request: Request) -> JsonRpcProcessor:
    """Build a processor around the shared, read-only server state."""
    state = request.app.state
    return JsonRpcProcessor(MCPHandlers(state.mcp_server, state.mcp_log))


def jsonrpc_reply(processor: JsonRpcProcessor, response) -> Response:
    status_code = processor.status_code(response)
    if response is None:
        return Response(status_code=status_code)
    return JSONResponse(content=response.model_dump(), status_code=status_code)


async def handle_jsonrpc(request: Request, expected_method: str | None = None) -> Response:
    processor = get_processor(request)
    body = await request.body()
    response = await processor.handle_message(
        body, request.headers.get("content-type"), expected_method
    )
    return jsonrpc_reply(processor, response)


router = APIRouter()


@router.post("/")
async def jsonrpc_endpoint(request: Request) -> Response:
    """Primary JSON-RPC 2.0 endpoint."""
    return await handle_jsonrpc(request)


@router.get("/manifest.json")
async def manifest_endpoint(request: Request) -> JSONResponse:
    """Server manifest wrapped in a success envelope."""
    server: McpServer = request.app.state.mcp_server
    request.app.state.mcp_log.info("MCP manifest request received", uri=str(request.url))
    envelope = responses.success(server.manifest().model_dump())
    return JSONResponse(content=envelope.model_dump())


@router.post("/manifest.json")
async def manifest_jsonrpc_endpoint(request: Request) -> Response:
    """POSTs to the manifest URL are treated as JSON-RPC calls."""
    return await handle_jsonrpc(request)


@router.post("/tools/call")
async def tools_call_endpoint(request: Request) -> Response:
    """JSON-RPC endpoint restricted to tools/call."""
    return await handle_jsonrpc(request, expected_method="tools/call")


@router.post("/tools/{tool}")
async def direct_tool_endpoint(request: Request, tool: str) -> JSONResponse:
    """
    Execute a tool directly with the request body as its arguments.

    Returns the MCP-shaped tool result, 404 for an unknown tool and
    400 ``{"error": ...}`` for any other failure.
    """
    if not SHORT_NAME_PATTERN.fullmatch(tool):
        raise StarletteHTTPException(status_code=404)

    body = await request.body()
    try:
        arguments = json.loads(body) if body.strip() else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return JSONResponse(status_code=400, content={"error": f"Invalid JSON in request body: {e}"})
    if not isinstance(arguments, dict):
        return JSONResponse(status_code=400, content={"error": "JSON body must be an object"})

    handlers = get_processor(request).handlers
    try:
        result = await handlers.execute_tool(tool, arguments)
    except ToolNotFoundError as e:
        return JSONResponse(status_code=404, content={"error": e.message})
    except Exception as e:
        logger.exception(f"Direct execution of tool {tool} failed")
        return JSONResponse(status_code=400, content={"error": str(e)})

    return JSONResponse(content=responses.as_tool_result(result))


# =============================================================================
# Application factory
# =============================================================================


async def route_not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer unmatched paths with a JSON 404; other HTTP errors use the default."""
    if exc.status_code != 404:
        return await http_exception_handler(request, exc)
    request.app.state.mcp_log.info(
        "Route not found", method=request.method, path=request.url.path
    )
    return JSONResponse(status_code=404, content={"error": "Route not found"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application from settings."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings)
        log = get_logger("startup")
        log.info(
            "Starting MCP server",
            server_name=settings.server_name,
            version=settings.server_version,
            enabled=settings.enabled,
            prefix=settings.route_prefix or "/",
            tool_count=app.state.mcp_server.registry.tool_count,
        )
        yield
        log.info("Shutting down MCP server")

    app = FastAPI(
        title="Simple MCP Server",
        description=settings.server_description,
        version=settings.server_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mcp_server = build_server(settings)
    app.state.mcp_log = ChannelLogger.from_settings(settings)

    app.add_exception_handler(StarletteHTTPException, route_not_found_handler)
    apply_middleware(app, settings.middleware)

    if settings.enabled:
        app.include_router(router, prefix=settings.route_prefix)
        if settings.route_prefix:
            # The prefix itself answers like "/" under it, without a redirect
            app.add_api_route(
                settings.route_prefix, jsonrpc_endpoint, methods=["POST"], include_in_schema=False
            )

    return app


app = create_app()


# =============================================================================
# Main Entry Point
# =============================================================================


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "simple_mcp.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
