"""
Redis Config Store
Field-level CRUD over one shared Redis hash with JSON value serialization
"""
import json
from typing import Dict, Any, Union

import redis.asyncio as redis
from redis.exceptions import RedisError

from redis_config_store.core.exceptions import ArgumentError, StoreError
from redis_config_store.services.cache.redis_service import duplicate_client
from redis_config_store.services.config_store.change_publisher import (
    RedisPubSubRefreshPolicyAndChangePublisher
)
from redis_config_store.utils.logging import get_logger

logger = get_logger(__name__)


def _to_str(value: Union[str, bytes]) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


class RedisConfigStore:
    """
    Thin accessor over the hash stored at ``key``.
    Holds no cached state; every call goes to Redis. Never publishes changes itself.
    """

    def __init__(self, redis_client: redis.Redis, key: str):
        if redis_client is None:
            raise ArgumentError("Missing redis_client")
        if not key:
            raise ArgumentError("Missing key")
        self.redis_client = redis_client
        self.key = key

    async def get_all(self) -> Dict[str, Any]:
        """
        Get every field of the hash, JSON-decoded
        
        Returns:
            Mapping of field name to value, empty when the hash does not exist
            
        Raises:
            StoreError: if the Redis read fails
        """
        try:
            reply = await self.redis_client.hgetall(self.key)
        except RedisError as e:
            logger.error(f"Failed to read config hash {self.key}: {e}", extra={"config_key": self.key})
            raise StoreError(f"Failed to read config hash {self.key}", key=self.key, operation="hgetall") from e

        if not reply:
            return {}
        return {_to_str(name): json.loads(value) for name, value in reply.items()}

    async def set(self, name: str, value: Any) -> Any:
        """
        Store ``value`` under ``name``, overwriting any previous value
        
        Returns:
            The value as given, before serialization
            
        Raises:
            StoreError: if the Redis write fails
        """
        value_to_store = json.dumps(value, ensure_ascii=False)
        try:
            await self.redis_client.hset(self.key, name, value_to_store)
        except RedisError as e:
            logger.error(f"Failed to set {name} in config hash {self.key}: {e}", extra={"config_key": self.key})
            raise StoreError(f"Failed to set {name} in config hash {self.key}", key=self.key, operation="hset") from e

        logger.debug(f"Config set: {self.key}.{name}", extra={"config_key": self.key})
        return value

    async def delete(self, name: str) -> int:
        """Delete ``name`` from the hash; returns the number of fields removed (0 if absent)"""
        try:
            deleted = await self.redis_client.hdel(self.key, name)
        except RedisError as e:
            logger.error(f"Failed to delete {name} from config hash {self.key}: {e}", extra={"config_key": self.key})
            raise StoreError(f"Failed to delete {name} from config hash {self.key}", key=self.key, operation="hdel") from e

        logger.debug(f"Config delete: {self.key}.{name} ({deleted} removed)", extra={"config_key": self.key})
        return deleted

    def to_extension(self, channel: str) -> RedisPubSubRefreshPolicyAndChangePublisher:
        """Create a change publisher and refresh policy for ``channel`` on a duplicate client"""
        if not channel:
            raise ArgumentError("Missing channel")
        return RedisPubSubRefreshPolicyAndChangePublisher(duplicate_client(self.redis_client), channel)
