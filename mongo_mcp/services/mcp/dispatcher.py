"""Tool dispatch: validate the arguments, route by tool name, run the query, wrap the result."""
import logging
from typing import Any, Awaitable, Callable, Dict

from pydantic import ValidationError

from mongo_mcp.exceptions import ToolValidationError, UnknownToolError
from mongo_mcp.schemas.request.mcp_request import ToolInvocation, ToolName
from mongo_mcp.schemas.response.mcp_response import TextContent, ToolResponse
from mongo_mcp.services.mongodb.client import MongoContext
from mongo_mcp.services.mongodb.query_service import find_documents, find_one_document, run_aggregation
from mongo_mcp.utils.bson_helpers import dumps_pretty

logger = logging.getLogger(__name__)

ToolHandler = Callable[[MongoContext, ToolInvocation], Awaitable[Any]]

async def _run_find(ctx: MongoContext, invocation: ToolInvocation):
    return await find_documents(ctx, invocation.collection, invocation.query, invocation.options)

async def _run_find_one(ctx: MongoContext, invocation: ToolInvocation):
    return await find_one_document(ctx, invocation.collection, invocation.query, invocation.options)

async def _run_aggregate(ctx: MongoContext, invocation: ToolInvocation):
    return await run_aggregation(ctx, invocation.collection, invocation.pipeline)

TOOL_HANDLERS: Dict[ToolName, ToolHandler] = {
    ToolName.FIND: _run_find,
    ToolName.FIND_ONE: _run_find_one,
    ToolName.AGGREGATE: _run_aggregate,
}

_unhandled = set(ToolName) - set(TOOL_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No handler registered for tools: {sorted(t.value for t in _unhandled)}")

def validate_invocation(name: str, arguments: Any) -> ToolInvocation:
    """
    Check a raw tool call before anything touches the database.

    Args:
        name: Tool name as sent by the client
        arguments: Tool arguments as sent by the client

    Returns:
        The validated invocation

    Raises:
        ToolValidationError: if the arguments are not a document, the
            collection is missing or empty, or a field has the wrong shape
        UnknownToolError: if the name is not one of the known tools
    """
    if not isinstance(arguments, dict):
        raise ToolValidationError("Invalid arguments format")

    collection = arguments.get("collection")
    if not isinstance(collection, str) or not collection:
        raise ToolValidationError("Collection name is required.")

    try:
        tool = ToolName(name)
    except ValueError:
        raise UnknownToolError(name) from None

    try:
        return ToolInvocation(
            name=tool,
            collection=collection,
            query=arguments.get("query"),
            pipeline=arguments.get("pipeline"),
            options=arguments.get("options"),
        )
    except ValidationError as e:
        error = e.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise ToolValidationError(f"Invalid argument '{location}': {error['msg']}") from e

async def dispatch_tool(ctx: MongoContext, name: str, arguments: Any) -> ToolResponse:
    """Validate and execute one tool call. Database errors propagate unchanged."""
    invocation = validate_invocation(name, arguments)
    logger.info(f"{invocation.name.value} called on collection {invocation.collection}")

    handler = TOOL_HANDLERS[invocation.name]
    result = await handler(ctx, invocation)

    return ToolResponse(
        type=invocation.name.value,
        content=[TextContent(text=dumps_pretty(result))],
    )
