"""Errors raised by the MongoDB MCP adapter."""


class MongoMCPError(Exception):
    """Base class for adapter errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(MongoMCPError):
    """The connection string cannot be used. Fatal at startup."""


class NotInitializedError(MongoMCPError):
    """A request arrived before the database connection was established."""

    def __init__(self, message: str = "Database connection not initialized."):
        super().__init__(message)


class CollectionNotFoundError(MongoMCPError):
    """The requested collection does not exist in the connected database."""

    def __init__(self, collection_name: str):
        super().__init__(f"Collection not found: {collection_name}")
        self.collection_name = collection_name


class ToolValidationError(MongoMCPError):
    """A request was rejected before any query was issued."""


class UnknownToolError(ToolValidationError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidResourceURIError(ToolValidationError):
    pass


class DatabaseMismatchError(ToolValidationError):
    def __init__(self, requested: str, connected: str):
        super().__init__(
            f'Requested database "{requested}" does not match connected database "{connected}"'
        )
        self.requested = requested
        self.connected = connected
