"""Main FastAPI application factory."""
from fastapi import FastAPI
from typing import Optional
from mongo_mcp.api.endpoints.mcp_endpoints import router as mcp_router
from mongo_mcp.config.settings import DATABASE_URL, LOG_FORMAT, LOG_LEVEL, SERVER_NAME, SERVER_VERSION
from mongo_mcp.services.mongodb.client import MongoContext
import logging

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

def create_app(ctx: Optional[MongoContext] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        ctx: Connection context to serve. Built from DATABASE_URL when omitted.
    """
    app = FastAPI(
        title="MongoDB MCP server",
        description="Collection schemas and find, findOne and aggregate queries over the Model Context Protocol",
        version=SERVER_VERSION,
    )
    app.state.mongo_context = ctx or MongoContext(DATABASE_URL)

    # Include routers
    app.include_router(mcp_router, prefix="/mcp", tags=["MongoDB MCP"])

    @app.get("/", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        ready = app.state.mongo_context.is_ready
        return {
            "status": "ok" if ready else "starting",
            "server": SERVER_NAME,
            "database": app.state.mongo_context.db_name,
        }

    @app.on_event("startup")
    async def startup_event():
        """Startup event handler."""
        logger.info("MongoDB MCP server is starting up...")
        await app.state.mongo_context.connect()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Shutdown event handler."""
        logger.info("MongoDB MCP server is shutting down...")
        app.state.mongo_context.close()

    return app
