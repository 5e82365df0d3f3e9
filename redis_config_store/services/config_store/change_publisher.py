"""
Redis Pub/Sub Change Publisher
Announces local config changes on a channel and refreshes the bound subscriber
when another publisher announces one
"""
import asyncio
import inspect
import uuid
from typing import Dict, Any, Optional

import redis.asyncio as redis

from redis_config_store.core.exceptions import ArgumentError, StateError
from redis_config_store.services.cache.redis_service import duplicate_client
from redis_config_store.services.config_store.types import ConfigSubscriber
from redis_config_store.utils.logging import get_logger

logger = get_logger(__name__)


class RedisPubSubRefreshPolicyAndChangePublisher:
    """
    Every message on the channel carries the sender's publisher_id.
    Messages carrying our own id are ignored; anything else, including an
    empty payload, refreshes the bound subscriber.
    """

    def __init__(self, redis_client: redis.Redis, channel: str):
        if redis_client is None:
            raise ArgumentError("Missing redis_client")
        if not channel:
            raise ArgumentError("Missing channel")
        self.redis_client = redis_client
        self.channel = channel
        self.publisher_id = str(uuid.uuid4())
        self.subscriber: Optional[ConfigSubscriber] = None

        self._subscriber_client = duplicate_client(redis_client)
        self._pubsub = self._subscriber_client.pubsub()
        self._started: Optional[asyncio.Future] = None
        self._listener_task: Optional[asyncio.Task] = None
        self.start_error: Optional[BaseException] = None

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop, channel {channel} subscribes on start()")
        else:
            self._started = asyncio.ensure_future(self._subscribe())
            self._started.add_done_callback(self._record_start_result)

    async def start(self) -> None:
        """Subscribe to the channel and start listening; safe to call more than once"""
        if self._started is None:
            self._started = asyncio.ensure_future(self._subscribe())
            self._started.add_done_callback(self._record_start_result)
        await self._started

    def subscribe(self, subscriber: ConfigSubscriber) -> None:
        """Bind the object refreshed on remote changes. Binding is permanent."""
        if self.subscriber is not None:
            raise StateError("Already subscribed")
        if subscriber is None:
            raise ArgumentError("Missing subscriber")
        self.subscriber = subscriber

    async def publish(self) -> int:
        """Announce a change; returns the number of clients that received it"""
        return await self.redis_client.publish(self.channel, self.publisher_id)

    async def refresh_subscriber(self, publisher_id: Optional[str] = None) -> bool:
        """
        Refresh the bound subscriber unless the change came from this publisher
        
        Args:
            publisher_id: Id carried by the incoming message, None when absent
            
        Returns:
            True if refresh was invoked
        """
        if self.subscriber is None or publisher_id == self.publisher_id:
            return False

        try:
            result = self.subscriber.refresh()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.debug(f"Subscriber refresh failed for channel {self.channel}: {e}")
        return True

    async def close(self) -> None:
        """Stop listening and release the dedicated pub/sub connection"""
        for task in (self._listener_task, self._started):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

        try:
            await self._pubsub.unsubscribe(self.channel)
            await self._pubsub.aclose()
            await self._subscriber_client.aclose()
            logger.info(f"Change publisher closed for channel {self.channel}")
        except Exception as e:
            logger.error(f"Error closing change publisher for channel {self.channel}: {e}")

    def _record_start_result(self, future: asyncio.Future) -> None:
        if future.cancelled():
            return
        self.start_error = future.exception()

    async def _subscribe(self) -> None:
        try:
            await self._pubsub.subscribe(self.channel)
        except Exception as e:
            logger.error(f"Failed to subscribe to channel {self.channel}: {e}")
            raise

        self._listener_task = asyncio.create_task(self._consume_messages())
        logger.info(
            f"Change publisher listening on channel {self.channel}",
            extra={"channel": self.channel, "publisher_id": self.publisher_id}
        )

    async def _consume_messages(self) -> None:
        try:
            async for message in self._pubsub.listen():
                if message.get("type") != "message":
                    continue
                await self._handle_message(message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error in pub/sub consumption for channel {self.channel}: {e}")

    async def _handle_message(self, message: Dict[str, Any]) -> None:
        data = message.get("data")
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        await self.refresh_subscriber(data)
