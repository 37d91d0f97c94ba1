"""MCP Server exposing the scheduling tools."""
import asyncio
import json
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import TOOL_DEFINITIONS, execute_tool

# MCP uses stdout for JSON-RPC, so redirect all logging to stderr
logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

# Create MCP server
server = Server("clinic-scheduling-tools")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name=definition["function"]["name"],
            description=definition["function"]["description"],
            inputSchema=definition["function"]["parameters"],
        )
        for definition in TOOL_DEFINITIONS
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Execute a tool and return result."""
    result = execute_tool(name, arguments or {})
    return [TextContent(type="text", text=json.dumps(result))]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
