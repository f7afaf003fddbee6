"""Tool definitions returned by tools/list."""
from typing import List

from mongo_mcp.schemas.request.mcp_request import ToolName
from mongo_mcp.schemas.response.mcp_response import ToolDefinition

_QUERY_INPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "collection": {"type": "string", "description": "Name of the collection to query"},
        "query": {"type": "object", "description": "MongoDB filter document"},
        "options": {"type": "object", "description": "Find options such as limit, sort, skip or projection"},
    },
    "required": ["collection"],
}

TOOL_DEFINITIONS: List[ToolDefinition] = [
    ToolDefinition(
        name=ToolName.FIND.value,
        description="Run a find query",
        input_schema=_QUERY_INPUT_SCHEMA,
    ),
    ToolDefinition(
        name=ToolName.FIND_ONE.value,
        description="Run a find one query",
        input_schema=_QUERY_INPUT_SCHEMA,
    ),
    ToolDefinition(
        name=ToolName.AGGREGATE.value,
        description="Run an aggregation pipeline",
        input_schema={
            "type": "object",
            "properties": {
                "collection": {"type": "string", "description": "Name of the collection to aggregate"},
                "pipeline": {
                    "type": "array",
                    "items": {"type": "object"},
                    "description": "Aggregation pipeline stages, run as given",
                },
            },
            "required": ["collection"],
        },
    ),
]
