"""Tests for the MCP stdio transport handlers."""

import asyncio
import json
import sys
import threading
from pathlib import Path
from unittest.mock import Mock

from mcp import types

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prbridge.dispatcher import ToolResult
from prbridge.errors import UnknownToolError
from prbridge.server import SERVER_NAME, build_server, handle_tool, tool_definitions

CATALOG = [
    {
        "name": "get-pr-comments",
        "description": "Get all comments",
        "inputSchema": {
            "type": "object",
            "properties": {"pull_number": {"type": "number"}},
            "required": ["pull_number"],
        },
    }
]


def _dispatcher(result: ToolResult | None = None) -> Mock:
    dispatcher = Mock()
    dispatcher.list_tools.return_value = CATALOG
    dispatcher.call.return_value = result or ToolResult.success({"ok": True})
    return dispatcher


def test_tool_definitions_mirror_dispatcher_catalog():
    """Verify MCP tool metadata carries names, descriptions and schemas."""
    tools = tool_definitions(_dispatcher())

    assert [tool.name for tool in tools] == ["get-pr-comments"]
    assert tools[0].description == "Get all comments"
    assert tools[0].inputSchema["required"] == ["pull_number"]


def test_handle_tool_success_is_json_text_content():
    """Verify tool payloads are JSON-encoded into a text content entry."""
    dispatcher = _dispatcher(ToolResult.success({"total_count": 0}))

    content = asyncio.run(handle_tool(dispatcher, "list-pull-requests", {"owner": "o", "repo": "r"}))

    dispatcher.call.assert_called_once_with("list-pull-requests", {"owner": "o", "repo": "r"})
    assert len(content) == 1
    assert content[0].type == "text"
    assert json.loads(content[0].text) == {"total_count": 0}


def test_handle_tool_failure_stays_text_content():
    """Verify logical failures are carried as ordinary text, not raised."""
    dispatcher = _dispatcher(ToolResult.failure(UnknownToolError("does-not-exist")))

    content = asyncio.run(handle_tool(dispatcher, "does-not-exist", {}))

    assert content[0].text == "Error: Unknown tool: does-not-exist"


def test_handle_tool_runs_dispatch_off_the_event_loop_thread():
    """Verify blocking GitHub calls do not run on the event loop thread."""
    loop_thread = threading.get_ident()
    seen = []

    def call(name, arguments):
        seen.append(threading.get_ident())
        return ToolResult.success({})

    dispatcher = _dispatcher()
    dispatcher.call.side_effect = call

    asyncio.run(handle_tool(dispatcher, "set-credential", {"token": "t"}))

    assert seen and seen[0] != loop_thread


def test_build_server_registers_tool_handlers():
    """Verify the MCP server answers tools/list from the dispatcher catalog."""
    server = build_server(_dispatcher())

    assert server.name == SERVER_NAME
    assert types.CallToolRequest in server.request_handlers
    list_handler = server.request_handlers[types.ListToolsRequest]

    response = asyncio.run(list_handler(types.ListToolsRequest(method="tools/list")))

    assert [tool.name for tool in response.root.tools] == ["get-pr-comments"]
