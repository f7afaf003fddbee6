"""MCP operations over HTTP."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from mongo_mcp.exceptions import CollectionNotFoundError, NotInitializedError, ToolValidationError
from mongo_mcp.schemas.request.mcp_request import CallToolRequest, ReadResourceRequest
from mongo_mcp.schemas.response.mcp_response import (
    ListResourcesResponse,
    ListToolsResponse,
    ReadResourceResponse,
    ResourceContents,
    ToolResponse,
)
from mongo_mcp.services.mcp.dispatcher import dispatch_tool
from mongo_mcp.services.mcp.server import read_schema_resource
from mongo_mcp.services.mcp.tool_defs import TOOL_DEFINITIONS
from mongo_mcp.services.mongodb.client import MongoContext
from mongo_mcp.services.mongodb.schema_service import list_collection_resources

logger = logging.getLogger(__name__)

router = APIRouter()

def get_context(request: Request) -> MongoContext:
    """Connection context created by the application factory."""
    return request.app.state.mongo_context

def to_http_exception(error: Exception) -> HTTPException:
    """Map adapter errors to status codes; anything else is a 500."""
    if isinstance(error, ToolValidationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, CollectionNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, NotInitializedError):
        return HTTPException(status_code=503, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))

@router.get("/resources", response_model=ListResourcesResponse, response_model_by_alias=True)
async def list_resources(ctx: MongoContext = Depends(get_context)):
    """List every collection as a schema resource with a one-document property sketch."""
    try:
        resources = await list_collection_resources(ctx)
    except Exception as e:
        logger.error(f"Error listing collections: {str(e)}")
        raise to_http_exception(e) from e
    return ListResourcesResponse(resources=resources)

@router.post("/resources/read", response_model=ReadResourceResponse, response_model_by_alias=True)
async def read_resource(request: ReadResourceRequest, ctx: MongoContext = Depends(get_context)):
    """
    Read a collection schema resource.

    - uri: mongodb://host/dbName/collectionName/schema
    """
    try:
        text = await read_schema_resource(ctx, request.uri)
    except Exception as e:
        logger.error(f"Error reading resource {request.uri}: {str(e)}")
        raise to_http_exception(e) from e
    return ReadResourceResponse(contents=[ResourceContents(uri=request.uri, text=text)])

@router.get("/tools", response_model=ListToolsResponse, response_model_by_alias=True)
async def list_tools():
    """List the available tools and their input schemas."""
    return ListToolsResponse(tools=TOOL_DEFINITIONS)

@router.post("/tools/call", response_model=ToolResponse)
async def call_tool(request: CallToolRequest, ctx: MongoContext = Depends(get_context)):
    """
    Call a tool.

    - name: find, findOne or aggregate
    - arguments: collection plus query, pipeline or options
    """
    try:
        return await dispatch_tool(ctx, request.name, request.arguments)
    except Exception as e:
        logger.error(f"Error in tool {request.name}: {str(e)}")
        raise to_http_exception(e) from e
