"""MongoDB configuration and connection settings."""

import os

from dotenv import load_dotenv

from cadence.common.base_cadence_model import BaseCadenceModel

load_dotenv()


class MongoDBConfig(BaseCadenceModel):
    """Configuration for MongoDB connection."""

    connection_string: str
    database_name: str

    # Connection pool settings
    max_pool_size: int = 10
    min_pool_size: int = 1


def get_mongodb_config() -> MongoDBConfig:
    """Get MongoDB configuration from environment variables.

    Environment variables:
        MONGODB_CONNECTION_STRING: MongoDB connection string
        MONGODB_DATABASE_NAME: Database name (default: cadence_dev)
    """
    connection_string = os.environ.get("MONGODB_CONNECTION_STRING", "")
    if not connection_string:
        msg = "MONGODB_CONNECTION_STRING environment variable is required"
        raise ValueError(msg)

    database_name = os.environ.get("MONGODB_DATABASE_NAME", "cadence_dev")

    return MongoDBConfig(
        connection_string=connection_string,
        database_name=database_name,
    )
