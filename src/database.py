"""Document store connection and index management."""

from typing import Any

import structlog
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError
from pymongo.monitoring import (
    ServerHeartbeatFailedEvent,
    ServerHeartbeatListener,
    ServerHeartbeatStartedEvent,
    ServerHeartbeatSucceededEvent,
)

from src.config import Settings
from src.exceptions import DatabaseConnectionError
from src.services.user_service import USERS_COLLECTION

logger = structlog.get_logger(__name__)


class HeartbeatLogger(ServerHeartbeatListener):
    """Logs loss of an established connection. The driver handles reconnects."""

    def started(self, event: ServerHeartbeatStartedEvent) -> None:
        pass

    def succeeded(self, event: ServerHeartbeatSucceededEvent) -> None:
        pass

    def failed(self, event: ServerHeartbeatFailedEvent) -> None:
        logger.error(
            "database_heartbeat_failed",
            server=f"{event.connection_id[0]}:{event.connection_id[1]}",
            error=str(event.reply),
        )


async def init_database(settings: Settings) -> tuple[AsyncMongoClient, Any]:
    """Connect to the document store, verify it answers and create indexes.

    Args:
        settings: Application settings with the connection string

    Returns:
        Tuple of (client, database)

    Raises:
        DatabaseConnectionError: If the server cannot be reached
    """
    client = AsyncMongoClient(
        settings.mongo_url,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        event_listeners=[HeartbeatLogger()],
        tz_aware=True,
    )

    try:
        await client.admin.command("ping")
        database = client.get_default_database(default=settings.mongo_database)
        await ensure_indexes(database)
    except PyMongoError as e:
        logger.error("database_connection_failed", error=str(e))
        await client.close()
        raise DatabaseConnectionError(str(e)) from e

    logger.info("database_connected", database=database.name)
    return client, database


async def ensure_indexes(database: Any) -> None:
    """Create the unique email index. Idempotent."""
    await database[USERS_COLLECTION].create_index(
        [("email", ASCENDING)], unique=True
    )


async def close_database(client: AsyncMongoClient) -> None:
    await client.close()
    logger.info("database_closed")
