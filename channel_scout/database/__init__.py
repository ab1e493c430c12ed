"""MongoDB storage for the channel catalog."""

from channel_scout.database.manager import (
    MongoDBManager,
    get_db_manager,
    get_db_manager_context,
)

__all__ = [
    "MongoDBManager",
    "get_db_manager",
    "get_db_manager_context",
]
