"""
Services package
Redis connectivity and the shared config store
"""

from .cache.redis_service import RedisService, duplicate_client
from .config_store import (
    RedisConfigStore,
    RedisPubSubRefreshPolicyAndChangePublisher,
    RefreshingConfig,
)

__all__ = [
    "RedisService",
    "duplicate_client",
    "RedisConfigStore",
    "RedisPubSubRefreshPolicyAndChangePublisher",
    "RefreshingConfig",
]
