"""Unit tests for document store startup."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from src.database import HeartbeatLogger, close_database, ensure_indexes, init_database
from src.exceptions import DatabaseConnectionError


@pytest.fixture
def mongo_client():
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client.close = AsyncMock()
    database = MagicMock()
    database.name = "social_test"
    database.__getitem__.return_value.create_index = AsyncMock()
    client.get_default_database.return_value = database
    return client


class TestInitDatabase:
    async def test_connects_and_creates_email_index(self, test_settings, mongo_client):
        with patch("src.database.AsyncMongoClient", return_value=mongo_client) as factory:
            client, database = await init_database(test_settings)

        assert client is mongo_client
        factory.assert_called_once()
        assert factory.call_args[0][0] == test_settings.mongo_url
        mongo_client.admin.command.assert_awaited_once_with("ping")
        mongo_client.get_default_database.assert_called_once_with(default="social")

        create_index = database["users"].create_index
        create_index.assert_awaited_once()
        assert create_index.call_args.kwargs["unique"] is True

    async def test_unreachable_server_is_fatal(self, test_settings, mongo_client):
        mongo_client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")

        with patch("src.database.AsyncMongoClient", return_value=mongo_client):
            with pytest.raises(DatabaseConnectionError):
                await init_database(test_settings)

        mongo_client.close.assert_awaited_once()


class TestHelpers:
    async def test_ensure_indexes_targets_users(self):
        database = MagicMock()
        database.__getitem__.return_value.create_index = AsyncMock()

        await ensure_indexes(database)

        database.__getitem__.assert_called_with("users")

    async def test_close_database(self):
        client = MagicMock()
        client.close = AsyncMock()
        await close_database(client)
        client.close.assert_awaited_once()

    def test_heartbeat_failure_is_only_logged(self):
        event = MagicMock()
        event.connection_id = ("db.internal", 27017)
        event.reply = ConnectionResetError("connection reset")

        # Must not raise
        HeartbeatLogger().failed(event)
