"""SaaS Image Crawler MCP Server.

Stdio MCP server exposing three tools: one remote crawl and two local
analysis tools over its results.
Run: saas-image-crawler-mcp
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData, ToolAnnotations

from . import __version__
from .core.dispatcher import ToolDispatcher
from .core.errors import ToolCallError
from .core.registry import ToolSpec, list_tools as registry_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "image-crawler"

server = Server(
    SERVER_NAME,
    version=__version__,
    instructions="Crawl SaaS websites for product images, then analyze or compare the results for alt-text quality, diversity, marketing language, and technical delivery.",
)

_dispatcher: Optional[ToolDispatcher] = None


def get_dispatcher() -> ToolDispatcher:
    """Get or create the dispatcher, reading crawler settings from the environment."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = ToolDispatcher()
    return _dispatcher


def _to_mcp_tool(spec: ToolSpec) -> types.Tool:
    return types.Tool(
        name=spec.name,
        title=spec.title,
        description=spec.description,
        inputSchema=spec.input_schema,
        annotations=ToolAnnotations(
            title=spec.title,
            readOnlyHint=spec.read_only,
            destructiveHint=False,
            idempotentHint=not spec.open_world,
            openWorldHint=spec.open_world,
        ),
    )


@server.list_tools()
async def list_tools() -> list[types.Tool]:
    """List the crawl and analysis tools."""
    return [_to_mcp_tool(spec) for spec in registry_tools()]


async def call_tool(name: str, arguments: Optional[dict[str, Any]]) -> list[types.TextContent]:
    """Dispatch a tool call; tool failures surface as McpError with a JSON-RPC code."""
    try:
        text = await get_dispatcher().dispatch(name, arguments)
    except ToolCallError as exc:
        raise McpError(ErrorData(code=exc.code, message=exc.message)) from exc
    return [types.TextContent(type="text", text=text)]


async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
    """Raw tools/call handler.

    Registered directly rather than through ``server.call_tool()``, whose wrapper
    folds every exception into an ``isError`` result and drops the error code.
    An McpError raised here reaches the client as a JSON-RPC error response.
    """
    content = await call_tool(request.params.name, request.params.arguments)
    return types.ServerResult(types.CallToolResult(content=content, isError=False))


server.request_handlers[types.CallToolRequest] = handle_call_tool


async def _run() -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Image Crawler MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main():
    """Entry point for the CLI command."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(_run())


if __name__ == "__main__":
    main()
