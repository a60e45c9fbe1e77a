"""MCP server wiring for gh-pr-mcp.

Lists the pull request tools and resources, dispatches tool calls, and maps
dispatch errors onto JSON-RPC errors.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

try:
    from mcp.server import Server
    from mcp.shared.exceptions import McpError
    from mcp.types import (INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND,
                           CallToolRequest, CallToolResult, ErrorData,
                           Resource, ServerResult, TextContent, Tool)
except ImportError as exc:  # pragma: no cover
    raise ImportError("MCP library not installed. Install with: pip install mcp") from exc

from . import __version__
from .errors import SafeError, not_found_error, safe_error_to_result
from .tools import TOOL_METADATA, dispatch_tool, initialize_runtime_from_env

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

SERVER_NAME = "gh-pr-mcp"

_RPC_ERROR_CODES: dict[str, int] = {
    "NotFound": METHOD_NOT_FOUND,
    "UserInput": INVALID_PARAMS,
}

server = Server(SERVER_NAME)


def _resources() -> list[Resource]:
    return [
        Resource(
            uri="gh-pr-mcp://server-status",
            name="Server Status",
            description="Non-secret server configuration",
        ),
        Resource(
            uri="gh-pr-mcp://capabilities",
            name="Capabilities",
            description="Available pull request operations and execution model",
        ),
    ]


def to_mcp_error(err: SafeError) -> McpError:
    """Translate a dispatch error into a JSON-RPC error."""
    code = _RPC_ERROR_CODES.get(err.code, INTERNAL_ERROR)
    return McpError(ErrorData(code=code, message=err.message, data=safe_error_to_result(err)))


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    tools: list[Tool] = []
    for tool_name, metadata in TOOL_METADATA.items():
        tools.append(
            Tool(
                name=tool_name,
                description=metadata["description"],
                inputSchema=metadata["inputSchema"],
            )
        )

    logger.info("Listed %s tools", len(tools))
    return tools


async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
    """Execute a tool and return a single-text-block result.

    Raises:
        McpError: unknown tool or invalid arguments.
    """
    logger.info("Tool called: %s", name)

    try:
        reply = await dispatch_tool(name, arguments)
    except SafeError as err:
        raise to_mcp_error(err) from err
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.error("Tool %s failed: %s", name, exc)
        raise McpError(ErrorData(code=INTERNAL_ERROR, message="Tool execution failed")) from exc

    return CallToolResult(content=[TextContent(type="text", text=reply.text)], isError=reply.is_error)


async def _handle_call_tool(req: CallToolRequest) -> ServerResult:
    return ServerResult(await call_tool(req.params.name, req.params.arguments))


# Registered directly instead of via @server.call_tool(): that decorator folds every
# exception into an isError result, and invalid arguments must surface as JSON-RPC errors.
server.request_handlers[CallToolRequest] = _handle_call_tool


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return _resources()


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read resource content."""
    uri_s = uri if isinstance(uri, str) else str(uri)

    if uri_s == "gh-pr-mcp://capabilities":
        caps = {
            "server": SERVER_NAME,
            "version": __version__,
            "operations": sorted(TOOL_METADATA.keys()),
            "execution": {
                "backend": "gh",
                "shell": False,
                "credential_handling": False,
            },
        }
        return json.dumps(caps, indent=2)

    if uri_s == "gh-pr-mcp://server-status":
        status: dict[str, Any] = {
            "server": SERVER_NAME,
            "version": __version__,
            "tools_available": len(TOOL_METADATA),
            "tool_names": sorted(TOOL_METADATA.keys()),
            "configured": False,
        }
        try:
            runtime = initialize_runtime_from_env()
            status["configured"] = True
            status["gh"] = {
                "executable": runtime.config.gh_path,
                "repo_dir_set": runtime.config.repo_dir is not None,
                "timeout_s": runtime.config.timeout_s,
            }
            status["audit"] = {"file_sink_enabled": runtime.config.audit_log_path is not None}
        except SafeError as err:
            status["configured"] = False
            status["error"] = safe_error_to_result(err)

        return json.dumps(status, indent=2)

    return json.dumps(not_found_error("Unknown resource"), indent=2)


async def run_server() -> None:
    """Run the server over stdio."""
    try:
        runtime = initialize_runtime_from_env()
    except SafeError as exc:
        logger.error("Startup configuration error: %s", exc.message)
        raise

    logging.getLogger().setLevel(runtime.config.log_level)

    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        logger.info("GitHub CLI MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def test_server() -> None:
    """Lightweight self-test to ensure tool/resource listing works."""
    _ = [
        Tool(name=name, description=meta["description"], inputSchema=meta["inputSchema"])
        for name, meta in TOOL_METADATA.items()
    ]
    _ = _resources()
