"""Shared motor client for the project store."""

import logging
from functools import cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from cadence.mongodb.config import MongoDBConfig, get_mongodb_config

logger = logging.getLogger(__name__)


class MongoDBClient:
    """Lazily connects to MongoDB on first use and owns the connection pool.

    The configuration is read from the environment the first time the
    database is touched, so the API can start without one.
    """

    def __init__(self, config: MongoDBConfig | None = None) -> None:
        self._config = config
        self._client: AsyncIOMotorClient | None = None

    @property
    def database(self) -> AsyncIOMotorDatabase:
        """Database holding the Cadence collections, connecting if needed."""
        if self._client is None or self._config is None:
            self._connect()
        if self._client is None or self._config is None:
            msg = "MongoDB client not initialized"
            raise RuntimeError(msg)
        return self._client[self._config.database_name]

    def _connect(self) -> None:
        if self._config is None:
            self._config = get_mongodb_config()
        self._client = AsyncIOMotorClient(
            self._config.connection_string,
            maxPoolSize=self._config.max_pool_size,
            minPoolSize=self._config.min_pool_size,
        )
        logger.info(
            "Connected to MongoDB database=%s (pool %d-%d)",
            self._config.database_name,
            self._config.min_pool_size,
            self._config.max_pool_size,
        )

    async def ping(self) -> bool:
        """Return True if the server answers a ping."""
        try:
            await self.database.client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False
        return True

    async def close(self) -> None:
        """Close the pool; a later access reconnects."""
        if self._client is None:
            return
        self._client.close()
        self._client = None
        logger.info("MongoDB connection closed")


@cache
def get_mongodb_client() -> MongoDBClient:
    """Get the process-wide MongoDB client."""
    return MongoDBClient()
