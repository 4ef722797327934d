from __future__ import annotations

import base64
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

import app.domain.services as domain_services
from app.domain.entities import ActionCode
from app.domain.errors import TransientStorageError
from app.domain.ports.action_code_store import ActionCodeStorePort

logger = logging.getLogger(__name__)

MAX_GENERATE_ATTEMPTS = 3

_LUA_ISSUE = """
-- KEYS[1]: code key (by digest)
-- KEYS[2]: latest-code pointer for subject/scope, or '' when not indexed
-- ARGV[1]: payload (base64)
-- ARGV[2]: expires_at (epoch millis)
-- ARGV[3]: digest
if redis.call('EXISTS', KEYS[1]) == 1 then
  return 0
end
redis.call('HSET', KEYS[1], 'data', ARGV[1], 'expires_at', ARGV[2])
redis.call('PEXPIREAT', KEYS[1], ARGV[2])
if KEYS[2] ~= '' then
  redis.call('SET', KEYS[2], ARGV[3], 'PXAT', ARGV[2])
end
return 1
"""

_LUA_CONSUME = """
-- KEYS[1]: code key (by digest)
local fields = redis.call('HGETALL', KEYS[1])
if #fields == 0 then
  return nil
end
redis.call('DEL', KEYS[1])
return fields
"""


def _to_millis(when: datetime) -> int:
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return int(when.timestamp() * 1000)


def _from_millis(ms: str | int) -> datetime:
    return datetime.fromtimestamp(int(ms) / 1000, tz=timezone.utc)


@contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except (RedisConnectionError, RedisTimeoutError) as e:
        logger.warning("action code store unavailable", extra={"error": str(e)})
        raise TransientStorageError("action code store unavailable") from e


class RedisActionCodeStore(ActionCodeStorePort):
    """
    Codes live in a hash keyed by the SHA256 digest of the code, with a
    PEXPIREAT matching expires_at. Consumption is a single Lua script so two
    racing retrievals can never both see the payload.
    """

    def __init__(self, redis: Redis, *, key_prefix: str = "code:") -> None:
        self._redis = redis
        self._prefix = key_prefix

    def _key(self, digest: str) -> str:
        return f"{self._prefix}{digest}"

    def _latest_key(self, subject: str, scope: str) -> str:
        # digests never contain ":", so (subject, scope) pairs cannot collide
        return (
            f"{self._prefix}latest:"
            f"{domain_services.code_digest(subject)}:{domain_services.code_digest(scope)}"
        )

    async def generate(
        self,
        data: bytes,
        expires_at: datetime,
        *,
        subject: str | None = None,
        scope: str | None = None,
    ) -> ActionCode:
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("action code payload must be bytes")

        expires_ms = _to_millis(expires_at)
        latest = (
            self._latest_key(subject, scope or "")
            if subject is not None
            else ""
        )
        encoded = base64.b64encode(bytes(data)).decode("ascii")

        for _ in range(MAX_GENERATE_ATTEMPTS):
            code = domain_services.generate_code()
            digest = domain_services.code_digest(code)
            with _storage_errors():
                created = await self._redis.eval(
                    _LUA_ISSUE,
                    2,
                    self._key(digest),
                    latest,
                    encoded,
                    str(expires_ms),
                    digest,
                )
            if int(created) == 1:
                return ActionCode(
                    code=code, expires_at=_from_millis(expires_ms), data=bytes(data)
                )
            logger.warning("action code collision; regenerating")

        raise RuntimeError("could not generate a unique action code")

    async def retrieve(self, code: str) -> Optional[ActionCode]:
        if not code:
            return None
        key = self._key(domain_services.code_digest(code))
        with _storage_errors():
            raw = await self._redis.eval(_LUA_CONSUME, 1, key)
        if not raw:
            return None
        found = self._decode(code, dict(zip(raw[0::2], raw[1::2])))
        if found is None or found.is_expired():
            return None
        return found

    async def retrieve_latest(self, subject: str, scope: str) -> Optional[ActionCode]:
        with _storage_errors():
            digest = await self._redis.get(self._latest_key(subject, scope or ""))
            if not digest:
                return None
            stored = await self._redis.hgetall(self._key(digest))
        found = self._decode(None, stored)
        if found is None or found.is_expired():
            return None
        return found

    @staticmethod
    def _decode(code: str | None, stored: dict) -> Optional[ActionCode]:
        if not stored or "data" not in stored or "expires_at" not in stored:
            return None
        return ActionCode(
            code=code,
            expires_at=_from_millis(stored["expires_at"]),
            data=base64.b64decode(stored["data"]),
        )
