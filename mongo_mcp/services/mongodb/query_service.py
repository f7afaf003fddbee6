"""MongoDB query service."""
import logging
from typing import Dict, List, Any, Optional

from mongo_mcp.services.mongodb.client import MongoContext

logger = logging.getLogger(__name__)

async def find_documents(
    ctx: MongoContext,
    collection_name: str,
    filter_query: Dict[str, Any],
    options: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Find documents in a MongoDB collection.

    Args:
        ctx: Connection context
        collection_name: Name of the collection to query
        filter_query: MongoDB filter query document
        options: Driver find options (limit, sort, skip, projection, ...),
            passed through verbatim

    Returns:
        Every matching document, in cursor order
    """
    collection = ctx.collection(collection_name)
    cursor = collection.find(filter_query, **(options or {}))
    return await cursor.to_list(length=None)

async def find_one_document(
    ctx: MongoContext,
    collection_name: str,
    filter_query: Dict[str, Any],
    options: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Find at most one document in a MongoDB collection.

    Returns:
        The first matching document, or None when nothing matches
    """
    collection = ctx.collection(collection_name)
    return await collection.find_one(filter_query, **(options or {}))

async def run_aggregation(
    ctx: MongoContext,
    collection_name: str,
    pipeline: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Run an aggregation pipeline as given. Stages are not validated here;
    a malformed stage surfaces as the server's OperationFailure.
    """
    collection = ctx.collection(collection_name)
    logger.debug(f"Aggregating {collection_name} with {len(pipeline)} stages")
    cursor = collection.aggregate(pipeline)
    return await cursor.to_list(length=None)
