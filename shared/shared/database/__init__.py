from shared.database.postgres import Base, get_async_session_factory
from shared.database.redis_client import RedisClient, close_redis_client, get_redis_client

__all__ = [
    "Base",
    "RedisClient",
    "close_redis_client",
    "get_async_session_factory",
    "get_redis_client",
]
