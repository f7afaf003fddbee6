"""MCP request schemas."""
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Dict, Any, List, Optional

class ToolName(str, Enum):
    """The closed set of tools the server exposes."""
    FIND = "find"
    FIND_ONE = "findOne"
    AGGREGATE = "aggregate"

class ToolInvocation(BaseModel):
    """One validated tool call. Built per request and discarded afterwards."""
    name: ToolName
    collection: str = Field(..., min_length=1, description="The name of the collection to query")
    query: Dict[str, Any] = Field(default_factory=dict, description="MongoDB filter query document")
    pipeline: List[Dict[str, Any]] = Field(default_factory=list, description="Aggregation pipeline stages")
    options: Dict[str, Any] = Field(default_factory=dict, description="Driver options passed through verbatim")

    @field_validator("query", "options", mode="before")
    @classmethod
    def _default_document(cls, value):
        return {} if value is None else value

    @field_validator("pipeline", mode="before")
    @classmethod
    def _default_pipeline(cls, value):
        return [] if value is None else value

class ReadResourceRequest(BaseModel):
    """Request schema for reading a collection schema resource over HTTP."""
    uri: str = Field(..., description="Resource URI, e.g. mongodb://host/dbName/collection/schema")

class CallToolRequest(BaseModel):
    """Request schema for calling a tool over HTTP."""
    name: str = Field(..., description="Tool name: find, findOne or aggregate")
    arguments: Optional[Any] = Field(None, description="Tool arguments document")
