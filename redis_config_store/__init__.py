"""
Redis-backed shared configuration with pub/sub change notification
"""

from redis_config_store.core.exceptions import (
    ConfigStoreException,
    ArgumentError,
    StateError,
    StoreError,
)
from redis_config_store.services.config_store import (
    RedisConfigStore,
    RedisPubSubRefreshPolicyAndChangePublisher,
    RefreshingConfig,
)

__version__ = "1.0.0"

__all__ = [
    "ConfigStoreException",
    "ArgumentError",
    "StateError",
    "StoreError",
    "RedisConfigStore",
    "RedisPubSubRefreshPolicyAndChangePublisher",
    "RefreshingConfig",
]
