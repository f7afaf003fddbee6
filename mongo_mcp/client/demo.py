"""Demonstration client: lists collections, reads a schema and runs each tool once."""
import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Callable, Dict, List, Optional

import httpx
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from pydantic import AnyUrl

from mongo_mcp.config.settings import LOG_FORMAT

logger = logging.getLogger(__name__)

# ANSI color codes for terminal output
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_BLUE = "\033[34m"
_RED = "\033[31m"
_RESET = "\033[0m"

DEMO_COLLECTION = "products"

def _paint(color: str, text: str) -> str:
    return f"{color}{text}{_RESET}"

def _cell(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)

def render_table(rows: List[Dict[str, Any]]) -> str:
    """Render a list of flat dicts as a plain text table."""
    if not rows:
        return "(empty)"

    columns: List[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)

    cells = [[_cell(row.get(c, "")) for c in columns] for row in rows]
    widths = [max(len(column), *(len(line[i]) for line in cells)) for i, column in enumerate(columns)]

    separator = "+-" + "-+-".join("-" * w for w in widths) + "-+"
    header = "| " + " | ".join(c.ljust(w) for c, w in zip(columns, widths)) + " |"
    body = ["| " + " | ".join(v.ljust(w) for v, w in zip(line, widths)) + " |" for line in cells]
    return "\n".join([separator, header, separator, *body, separator])

class StdioBackend:
    """Talks to the server through an MCP client session."""

    def __init__(self, session: ClientSession):
        self.session = session

    async def list_resources(self) -> List[Dict[str, Any]]:
        result = await self.session.list_resources()
        return [resource.model_dump(mode="json") for resource in result.resources]

    async def read_resource(self, uri: str) -> Dict[str, Any]:
        result = await self.session.read_resource(AnyUrl(uri))
        return result.contents[0].model_dump(mode="json")

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        result = await self.session.call_tool(name, arguments)
        return result.model_dump(mode="json")

class HttpBackend:
    """Talks to the FastAPI transport."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def list_resources(self) -> List[Dict[str, Any]]:
        response = await self.client.get("/mcp/resources")
        response.raise_for_status()
        return response.json()["resources"]

    async def read_resource(self, uri: str) -> Dict[str, Any]:
        response = await self.client.post("/mcp/resources/read", json={"uri": uri})
        response.raise_for_status()
        return response.json()["contents"][0]

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.post("/mcp/tools/call", json={"name": name, "arguments": arguments})
        response.raise_for_status()
        return response.json()

def print_tool_response(title: str, response: Dict[str, Any], out: Callable[[str], None] = print) -> None:
    out(_paint(_GREEN, title))
    content = response.get("content")
    if response.get("isError"):
        message = content[0].get("text") if content else "unknown error"
        out(_paint(_RED, f"Tool error: {message}"))
    elif isinstance(content, list) and content and content[0].get("text"):
        out(json.dumps(json.loads(content[0]["text"]), indent=2))
    else:
        out(_paint(_RED, "Invalid tool response format"))

async def run_demo(backend, out: Callable[[str], None] = print) -> None:
    """Drive every server operation once and print what comes back."""
    out(_paint(_CYAN, "Fetching available collections..."))
    resources = await backend.list_resources()
    out(_paint(_GREEN, "Available collections:"))
    if not resources:
        out(_paint(_YELLOW, "No collections found in the database."))
        return

    for index, resource in enumerate(resources, start=1):
        out(f"{index}. Schema: {_paint(_YELLOW, resource['name'])}")
        properties = json.loads(resource.get("properties") or "{}")
        out(render_table([{"field": name, "type": tag} for name, tag in properties.items()]))

    out(_paint(_BLUE, "Fetching resource contents..."))
    contents = await backend.read_resource(resources[0]["uri"])
    out(_paint(_GREEN, "Resource contents:"))
    out(f"uri: {contents['uri']}")
    out(render_table(json.loads(contents["text"])))

    find_response = await backend.call_tool(
        "find",
        {"collection": DEMO_COLLECTION, "query": {"color": "#000"}, "options": {"limit": 10}},
    )
    find_one_response = await backend.call_tool(
        "findOne",
        {"collection": DEMO_COLLECTION, "query": {"color": "#000"}},
    )
    aggregate_response = await backend.call_tool(
        "aggregate",
        {
            "collection": DEMO_COLLECTION,
            "pipeline": [{"$group": {"_id": "$category", "count": {"$sum": 1}}}],
        },
    )

    print_tool_response("Tool response:", find_response, out)
    print_tool_response("Tool response 2:", find_one_response, out)
    print_tool_response("Tool response 3:", aggregate_response, out)

async def run_client(http_url: Optional[str] = None) -> None:
    print(_paint(_YELLOW, "Connecting to MCP MongoDB server..."))

    if http_url:
        async with httpx.AsyncClient(base_url=http_url, timeout=30.0) as client:
            print(_paint(_GREEN, f"✓ Using MCP MongoDB server at {http_url}"))
            await run_demo(HttpBackend(client))
        return

    parameters = StdioServerParameters(
        command=sys.executable,
        args=["-m", "mongo_mcp.runner"],
        env=dict(os.environ),
    )
    async with stdio_client(parameters) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            print(_paint(_GREEN, "✓ Connected to MCP MongoDB server"))
            await run_demo(StdioBackend(session))

def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="MongoDB MCP demonstration client")
    parser.add_argument("--http", metavar="URL", help="Use the HTTP transport at URL instead of spawning the stdio server")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        asyncio.run(run_client(http_url=args.http))
    except Exception as e:
        logger.error(f"Client failed to start or encountered a fatal error: {str(e)}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()
