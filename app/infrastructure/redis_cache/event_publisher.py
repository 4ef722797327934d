from __future__ import annotations

import logging

from redis.asyncio import Redis

from app.domain.ports.event_publisher import AccountEventPublisherPort
from app.schemas.events import AccountEvent

logger = logging.getLogger(__name__)


class RedisAccountEventPublisher(AccountEventPublisherPort):
    """Publishes account events as JSON on a Redis pub/sub channel."""

    def __init__(self, redis: Redis, *, channel: str = "account-events") -> None:
        self._redis = redis
        self._channel = channel

    async def publish(self, event: AccountEvent) -> None:
        receivers = await self._redis.publish(self._channel, event.model_dump_json())
        logger.debug(
            "account event published",
            extra={"type": event.type, "channel": self._channel, "receivers": receivers},
        )
