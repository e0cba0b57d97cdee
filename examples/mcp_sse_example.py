#!/usr/bin/env python3
"""
MCP Server SSE Example.

Connects to a running formcraft MCP server over SSE, lists its tools,
creates a field and validates a submission against it.

Prerequisites:
    1. Start the server:
       python run_mcp_server.py --transport sse --port 8080

    2. Health check:
       curl http://localhost:8080/health

Usage:
    python examples/mcp_sse_example.py
    MCP_URL=http://remote:8080/sse python examples/mcp_sse_example.py
"""

import asyncio
import json
import os
import sys

from mcp import ClientSession
from mcp.client.sse import sse_client


def _payload(result) -> dict:
    """Decode the JSON text content returned by a formcraft tool."""
    return json.loads(result.content[0].text)


async def main():
    """Create a field through the MCP server and validate values against it."""
    mcp_url = os.environ.get("MCP_URL", "http://localhost:8080/sse")

    print("=" * 60)
    print("formcraft MCP Server SSE Example")
    print("=" * 60)
    print(f"MCP Server URL: {mcp_url}")
    print()

    async with sse_client(mcp_url) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()

            tools = await session.list_tools()
            print(f"Available tools ({len(tools.tools)}):")
            for tool in tools.tools:
                print(f"   - {tool.name}")
            print()

            created = _payload(
                await session.call_tool(
                    "create_field",
                    {"type": "email", "attributes": {"label": "Work email", "required": True}},
                )
            )
            if "error" in created:
                print(f"create_field failed: {created['error']}")
                return 1
            field = created["field"]
            print(f"Created field {field['id']} ({field['type']})")

            for value in ("", "not-an-email", "ada@example.com"):
                checked = _payload(
                    await session.call_tool(
                        "validate_submission",
                        {"fields": [field], "values": {field["id"]: value}},
                    )
                )
                verdict = "ok" if checked["isValid"] else checked["errors"][field["id"]]
                print(f"   {value!r:<20} -> {verdict}")

    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
