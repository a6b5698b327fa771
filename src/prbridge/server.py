"""MCP stdio transport exposing the tool dispatcher."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from . import __version__
from .dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "github-pr-bridge"


def tool_definitions(dispatcher: ToolDispatcher) -> List[Tool]:
    """Build MCP tool metadata from the dispatcher catalog."""
    return [
        Tool(name=tool["name"], description=tool["description"], inputSchema=tool["inputSchema"])
        for tool in dispatcher.list_tools()
    ]


async def handle_tool(
    dispatcher: ToolDispatcher,
    name: str,
    arguments: Optional[Dict[str, Any]],
) -> List[TextContent]:
    """Run one tool call off the event loop and wrap its outcome as text content.

    Failures come back as ``"Error: ..."`` text in an ordinary result, never
    as a protocol error.
    """
    result = await asyncio.to_thread(dispatcher.call, name, arguments)
    return [TextContent(**item) for item in result.to_content()]


def build_server(dispatcher: ToolDispatcher) -> Server:
    """Create an MCP server whose handlers delegate to ``dispatcher``."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return tool_definitions(dispatcher)

    # Arguments are coerced by the handlers; malformed optional fields fall
    # back to defaults instead of being rejected against the schema.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        return await handle_tool(dispatcher, name, arguments)

    return server


async def serve(dispatcher: ToolDispatcher) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    server = build_server(dispatcher)
    logger.info("Bridge listening on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("Input closed; bridge stopping")
