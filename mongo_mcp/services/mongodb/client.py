"""MongoDB connection context."""
import logging
from typing import Any, Callable, Optional
from urllib.parse import quote, unquote, urlsplit

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import monitoring
from pymongo.errors import ConfigurationError as PyMongoConfigurationError, PyMongoError

from mongo_mcp.config.settings import MONGODB_SERVER_SELECTION_TIMEOUT_MS
from mongo_mcp.exceptions import ConfigurationError, NotInitializedError

logger = logging.getLogger(__name__)


class ConnectionLogger(monitoring.ServerListener):
    """Log the driver's server open and close events."""

    def opened(self, event):
        logger.debug(f"Monitoring server {event.server_address}")

    def description_changed(self, event):
        pass

    def closed(self, event):
        logger.info(f"MongoDB connection to {event.server_address} closed.")


def parse_database_name(connection_string: str) -> str:
    """
    Extract the database name from a connection string.

    The name is the first path segment, as in ``mongodb://host:27017/dbName``.

    Raises:
        ConfigurationError: if the string is malformed or names no database
    """
    try:
        parts = urlsplit(connection_string)
    except ValueError as e:
        raise ConfigurationError(f"Malformed connection string: {e}") from e

    if not parts.scheme.startswith("mongodb") or not parts.netloc:
        raise ConfigurationError(
            f"Malformed connection string, expected mongodb://host/dbName: {connection_string!r}"
        )

    db_name = unquote(parts.path.lstrip("/").split("/")[0])
    if not db_name:
        raise ConfigurationError(
            "Could not determine database name from connection string. "
            "Please include it (e.g., mongodb://host/dbName)."
        )
    return db_name


def build_resource_base_uri(connection_string: str, db_name: str) -> str:
    """
    Base URI for collection resources: credentials and options stripped,
    always the plain ``mongodb`` scheme, ending in ``/<dbName>/``.

    A seed list keeps only its first host so the URI stays a valid URL.
    """
    hosts = urlsplit(connection_string).netloc.rsplit("@", 1)[-1]
    host = hosts.split(",")[0]
    return f"mongodb://{host}/{quote(db_name, safe='')}/"


class MongoContext:
    """
    The single database handle shared by every request.

    A context starts out not ready; ``connect`` makes it ready and ``close``
    releases it. Request handlers read ``db``, which raises
    ``NotInitializedError`` until the context is ready.
    """

    def __init__(
        self,
        connection_string: str,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
        server_selection_timeout_ms: int = MONGODB_SERVER_SELECTION_TIMEOUT_MS,
    ):
        self.connection_string = connection_string
        self.db_name = parse_database_name(connection_string)
        self.resource_base_uri = build_resource_base_uri(connection_string, self.db_name)
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self.client: Optional[Any] = None
        self._db = None
        self._closed = False

    @property
    def is_ready(self) -> bool:
        return self._db is not None

    @property
    def db(self):
        if self._db is None:
            raise NotInitializedError()
        return self._db

    def collection(self, name: str):
        return self.db[name]

    async def connect(self):
        """Create the client and ping the server so a bad address fails at startup."""
        if self._db is not None:
            return self._db

        try:
            client = self._client_factory(
                self.connection_string,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                event_listeners=[ConnectionLogger()],
            )
        except PyMongoConfigurationError as e:
            raise ConfigurationError(f"Invalid MongoDB connection string: {e}") from e

        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {str(e)}")
            client.close()
            raise

        self.client = client
        self._db = client[self.db_name]
        logger.info(f"Database connection successful ({self.db_name}).")
        return self._db

    def close(self) -> None:
        """Close the client. Later calls do nothing."""
        if self.client is None or self._closed:
            return
        self._closed = True
        self._db = None
        self.client.close()
        logger.info("MongoDB connection closed.")
