"""MCP response schemas."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Any, List

JSON_MIME_TYPE = "application/json"

class SchemaSummaryEntry(BaseModel):
    """Observed BSON types and occurrence count for one top-level field."""
    field_name: str
    observed_types: List[str]  # Sorted distinct $type names
    occurrence_count: int

class CollectionResource(BaseModel):
    """A collection listed as a discoverable schema resource."""
    model_config = ConfigDict(populate_by_name=True)

    uri: str
    mime_type: str = Field(JSON_MIME_TYPE, alias="mimeType")
    name: str
    properties: str  # JSON text: field name -> coarse type tag

class ResourceContents(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uri: str
    mime_type: str = Field(JSON_MIME_TYPE, alias="mimeType")
    text: str

class ListResourcesResponse(BaseModel):
    resources: List[CollectionResource]

class ReadResourceResponse(BaseModel):
    contents: List[ResourceContents]

class ToolDefinition(BaseModel):
    """A tool as advertised to clients."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(..., alias="inputSchema")

class ListToolsResponse(BaseModel):
    tools: List[ToolDefinition]

class TextContent(BaseModel):
    type: str = "text"
    text: str

class ToolResponse(BaseModel):
    """Uniform envelope for every tool result."""
    type: str  # Tool name
    content: List[TextContent]
