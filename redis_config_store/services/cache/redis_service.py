"""
Redis Service
Redis client with connection management and error handling
Hands out dedicated duplicate clients for pub/sub listeners
"""
import asyncio
from typing import Dict, Any, Optional
import redis.asyncio as redis

from redis_config_store.config.settings import get_settings
from redis_config_store.utils.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)


def duplicate_client(client: redis.Redis) -> redis.Redis:
    """
    Build a new client with its own connection pool and the same connection settings.
    A subscribed connection only accepts pub/sub commands, so listeners never share
    a pool with hash traffic.
    """
    pool = client.connection_pool
    duplicate_pool = pool.__class__(
        connection_class=pool.connection_class,
        max_connections=pool.max_connections,
        **pool.connection_kwargs
    )
    return redis.Redis.from_pool(duplicate_pool)


class RedisService:
    """
    Redis service with connection pooling and error handling
    """

    def __init__(self):
        self.redis_pool: Optional[redis.ConnectionPool] = None
        self.redis_client: Optional[redis.Redis] = None
        self._initialized = False
        self._connection_retries = 0
        self._max_retries = settings.REDIS_MAX_RETRIES

    async def initialize(self):
        """Initialize Redis connection pool"""
        try:
            self.redis_pool = redis.ConnectionPool.from_url(
                settings.redis_url,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                retry_on_timeout=True,
                health_check_interval=30,
                socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
                decode_responses=True
            )
            
            self.redis_client = redis.Redis(connection_pool=self.redis_pool)
            
            await self.redis_client.ping()
            self._initialized = True
            self._connection_retries = 0
            
            logger.info("Redis service initialized successfully")
            
        except Exception as e:
            self._connection_retries += 1
            logger.error(f"Failed to initialize Redis service (attempt {self._connection_retries}): {e}")
            
            if self._connection_retries < self._max_retries:
                await asyncio.sleep(2 ** self._connection_retries)
                await self.initialize()
            else:
                logger.error("Max Redis connection retries reached")
                self._connection_retries = 0
                raise

    def get_client(self) -> Optional[redis.Redis]:
        """Get Redis client instance"""
        return self.redis_client if self._initialized else None

    async def _ensure_connection(self):
        """Ensure Redis connection is available"""
        if not self._initialized:
            await self.initialize()

    async def ping(self) -> bool:
        """Test Redis connection"""
        try:
            if self.redis_client:
                await self.redis_client.ping()
                return True
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
        return False

    async def get_config_store(self, key: Optional[str] = None):
        """Get a config store over the shared client, keyed by CONFIG_KEY unless given"""
        from redis_config_store.services.config_store.redis_config_store import RedisConfigStore

        await self._ensure_connection()
        return RedisConfigStore(self.redis_client, key or settings.CONFIG_KEY)

    async def health_check(self) -> Dict[str, Any]:
        """Redis health check"""
        health_status = {
            "status": "unknown",
            "ping": False,
            "error": None
        }
        
        if await self.ping():
            health_status["ping"] = True
            health_status["status"] = "healthy"
        else:
            health_status["status"] = "unhealthy"
            health_status["error"] = "Ping failed"
        
        return health_status

    async def close(self):
        """Close Redis connections"""
        try:
            if self.redis_client:
                await self.redis_client.aclose()
            if self.redis_pool:
                await self.redis_pool.disconnect()
            
            self._initialized = False
            logger.info("Redis service connections closed")
            
        except Exception as e:
            logger.error(f"Error closing Redis connections: {e}")

