from .change_publisher import RedisPubSubRefreshPolicyAndChangePublisher
from .redis_config_store import RedisConfigStore
from .refreshing_config import RefreshingConfig

__all__ = [
    "RedisConfigStore",
    "RedisPubSubRefreshPolicyAndChangePublisher",
    "RefreshingConfig",
]
