"""Configuration settings for the MCP server."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# MongoDB settings
DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017/mcp_db")
MONGODB_SCHEMA_SAMPLE_SIZE = int(os.getenv("MONGODB_SCHEMA_SAMPLE_SIZE", 100))
MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", 10000))

# MCP server identity
SERVER_NAME = os.getenv("SERVER_NAME", "mcp/mongodb")
SERVER_VERSION = os.getenv("SERVER_VERSION", "1.0.0")

# HTTP transport settings
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
