import json

from app.infrastructure.redis_cache.event_publisher import RedisAccountEventPublisher
from app.schemas.events import PasswordResetRequested


class StubRedis:
    def __init__(self):
        self.published: list[tuple[str, str]] = []

    async def publish(self, channel, message):
        self.published.append((channel, message))
        return 1


async def test_event_is_published_as_json():
    redis = StubRedis()
    publisher = RedisAccountEventPublisher(redis, channel="events-test")

    await publisher.publish(
        PasswordResetRequested(
            zone_id="uaa", subject="user@example.com", user_id="u1", code="abc"
        )
    )

    channel, message = redis.published[0]
    assert channel == "events-test"
    body = json.loads(message)
    assert body["type"] == "password_reset_requested"
    assert body["subject"] == "user@example.com"
    assert body["user_id"] == "u1"
    assert body["code"] == "abc"
    assert body["zone_id"] == "uaa"
    assert "occurred_at" in body
