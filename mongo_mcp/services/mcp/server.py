"""MCP server exposing collection schemas as resources and queries as tools."""
import logging
from typing import Any, Dict, List

from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from mongo_mcp.config.settings import SERVER_NAME, SERVER_VERSION
from mongo_mcp.exceptions import NotInitializedError
from mongo_mcp.schemas.response.mcp_response import JSON_MIME_TYPE
from mongo_mcp.services.mcp.dispatcher import dispatch_tool
from mongo_mcp.services.mcp.tool_defs import TOOL_DEFINITIONS
from mongo_mcp.services.mongodb.client import MongoContext
from mongo_mcp.services.mongodb.schema_service import (
    infer_collection_schema,
    list_collection_resources,
    parse_schema_uri,
)
from mongo_mcp.utils.bson_helpers import dumps_pretty

logger = logging.getLogger(__name__)

async def read_schema_resource(ctx: MongoContext, uri: str) -> str:
    """Validate a schema URI, run schema inference and return the summary as JSON text."""
    if not ctx.is_ready:
        raise NotInitializedError()

    collection_name = parse_schema_uri(ctx, uri)
    entries = await infer_collection_schema(ctx, collection_name)
    return dumps_pretty([entry.model_dump() for entry in entries])

def create_server(ctx: MongoContext) -> Server:
    """
    Build an MCP server bound to a connection context.

    Handlers read the context on every request; nothing else is shared
    between requests.
    """
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_resources()
    async def list_resources() -> List[types.Resource]:
        try:
            resources = await list_collection_resources(ctx)
        except Exception as e:
            logger.error(f"Error listing collections: {str(e)}")
            raise

        return [
            types.Resource(
                uri=AnyUrl(resource.uri),
                name=resource.name,
                mimeType=resource.mime_type,
                properties=resource.properties,
            )
            for resource in resources
        ]

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> List[ReadResourceContents]:
        try:
            text = await read_schema_resource(ctx, str(uri))
        except Exception as e:
            logger.error(f"Error reading resource {uri}: {str(e)}")
            raise
        return [ReadResourceContents(content=text, mime_type=JSON_MIME_TYPE)]

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=definition.input_schema,
            )
            for definition in TOOL_DEFINITIONS
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        try:
            response = await dispatch_tool(ctx, name, arguments)
        except Exception as e:
            logger.error(f"Error in tool {name}: {str(e)}")
            raise

        return types.CallToolResult(
            content=[types.TextContent(type="text", text=item.text) for item in response.content],
            type=response.type,
        )

    @server.list_prompts()
    async def list_prompts() -> List[types.Prompt]:
        return []

    return server

async def serve_stdio(server: Server) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
