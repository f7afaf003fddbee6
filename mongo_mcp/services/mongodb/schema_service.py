"""MongoDB schema service."""
import asyncio
import logging
from collections.abc import Mapping
from typing import Dict, List, Any
from urllib.parse import quote, unquote, urlsplit

import bson
from pymongo.errors import OperationFailure

from mongo_mcp.config.settings import MONGODB_SCHEMA_SAMPLE_SIZE
from mongo_mcp.exceptions import CollectionNotFoundError, DatabaseMismatchError, InvalidResourceURIError
from mongo_mcp.schemas.response.mcp_response import CollectionResource, SchemaSummaryEntry
from mongo_mcp.services.mongodb.client import MongoContext
from mongo_mcp.utils.bson_helpers import dumps_pretty

logger = logging.getLogger(__name__)

SCHEMA_PATH = "schema"

# Server error code for "ns not found"
NAMESPACE_NOT_FOUND = 26

def get_coarse_type_name(value: Any) -> str:
    """
    Get a coarse type tag for a document value.

    Args:
        value: The value to get the type for

    Returns:
        One of "string", "number", "boolean", "object", "array" or "null"
    """
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, (int, float, bson.Int64, bson.Decimal128)):
        return "number"
    elif isinstance(value, list):
        return "array"
    else:
        # Embedded documents, ObjectId, dates, binary and the rest
        return "object"

def get_document_properties(doc: Mapping) -> Dict[str, str]:
    """Map each top-level field of a single document to its coarse type tag."""
    if not doc:
        return {}
    return {field_name: get_coarse_type_name(value) for field_name, value in doc.items()}

def build_schema_pipeline(sample_size: int) -> List[Dict[str, Any]]:
    """Aggregation that groups a random sample's top-level keys by name."""
    return [
        {"$sample": {"size": sample_size}},
        {"$project": {"arrayOfKeyValue": {"$objectToArray": "$$ROOT"}}},
        {"$unwind": "$arrayOfKeyValue"},
        {
            "$group": {
                "_id": "$arrayOfKeyValue.k",
                "types": {"$addToSet": {"$type": "$arrayOfKeyValue.v"}},
                "count": {"$sum": 1},
            }
        },
    ]

def build_schema_uri(ctx: MongoContext, collection_name: str) -> str:
    """URI of a collection's schema resource: ``mongodb://host/dbName/collection/schema``."""
    return f"{ctx.resource_base_uri}{quote(collection_name, safe='')}/{SCHEMA_PATH}"

def parse_schema_uri(ctx: MongoContext, uri: str) -> str:
    """
    Validate a schema resource URI and return the collection name it names.

    Raises:
        InvalidResourceURIError: if the URI is not ``.../dbName/collection/schema``
        DatabaseMismatchError: if dbName is not the connected database
    """
    path_components = [unquote(part) for part in urlsplit(str(uri)).path[1:].split("/")]

    if len(path_components) < 3 or path_components[-1] != SCHEMA_PATH:
        raise InvalidResourceURIError(
            f"Invalid resource URI format. Expected mongodb://.../dbName/collectionName/{SCHEMA_PATH}"
        )

    requested_db_name, collection_name = path_components[0], path_components[1]
    if requested_db_name != ctx.db_name:
        raise DatabaseMismatchError(requested_db_name, ctx.db_name)
    if not collection_name:
        raise InvalidResourceURIError(f"Resource URI names no collection: {uri}")
    return collection_name

async def _collection_exists(ctx: MongoContext, collection_name: str) -> bool:
    names = await ctx.db.list_collection_names(filter={"name": collection_name})
    return collection_name in names

async def infer_collection_schema(
    ctx: MongoContext,
    collection_name: str,
    sample_size: int = MONGODB_SCHEMA_SAMPLE_SIZE,
) -> List[SchemaSummaryEntry]:
    """
    Infer the top-level schema of a collection from a random sample.

    Only top-level keys are summarized. A field missing from every sampled
    document gets no entry, and entry order follows the aggregation, so two
    calls on a large collection may differ.

    Args:
        ctx: Connection context
        collection_name: Name of the collection to infer schema for
        sample_size: Maximum number of documents to sample

    Returns:
        One entry per distinct field name seen in the sample

    Raises:
        NotInitializedError: if the context is not connected
        CollectionNotFoundError: if the collection does not exist
    """
    collection = ctx.collection(collection_name)

    try:
        cursor = collection.aggregate(build_schema_pipeline(sample_size))
        rows = await cursor.to_list(length=None)
    except OperationFailure as e:
        logger.error(f'Error reading schema for collection "{collection_name}": {str(e)}')
        if e.code == NAMESPACE_NOT_FOUND or "ns not found" in str(e):
            raise CollectionNotFoundError(collection_name) from e
        raise

    # Aggregating a missing namespace yields an empty cursor on current servers
    if not rows and not await _collection_exists(ctx, collection_name):
        raise CollectionNotFoundError(collection_name)

    return [
        SchemaSummaryEntry(
            field_name=row["_id"],
            observed_types=sorted(set(row["types"])),
            occurrence_count=row["count"],
        )
        for row in rows
    ]

async def describe_collection(ctx: MongoContext, collection_name: str) -> CollectionResource:
    """Build the resource descriptor for one collection from a single document."""
    sample = await ctx.collection(collection_name).find_one({})
    properties = get_document_properties(sample)
    return CollectionResource(
        uri=build_schema_uri(ctx, collection_name),
        name=collection_name,
        properties=dumps_pretty(properties),
    )

async def list_collection_resources(ctx: MongoContext) -> List[CollectionResource]:
    """
    List every collection in the connected database as a schema resource.

    Each resource carries a shallow property sketch taken from one arbitrary
    document; fetch the schema resource for a sampled summary.
    """
    collection_names = await ctx.db.list_collection_names()
    resources = await asyncio.gather(
        *(describe_collection(ctx, name) for name in collection_names)
    )
    logger.info(f"Listed {len(resources)} collections in {ctx.db_name}")
    return list(resources)
