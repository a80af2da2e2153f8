"""Per-event critical section backed by a Redis lock."""

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as redis

from eventhub.config import get_settings

settings = get_settings()

KEY_PREFIX = "lock:"

# Delete the key only while it still carries the caller's token
RELEASE_IF_OWNER = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class DistributedLockError(Exception):
    """Raised when a lock could not be taken within the retry budget."""


def event_lock_key(event_id: int) -> str:
    """Lock name serializing every availability-changing write of one event."""
    return f"event:{event_id}"


class DistributedLock:
    """
    Mutual exclusion across API workers through a single Redis key.

    The key is written with SET NX EX, so an abandoned lock expires on its
    own after ``timeout_seconds``. Each holder writes a random token and the
    release script compares it before deleting.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        name: str,
        timeout_seconds: int | None = None,
        retry_delay_ms: int | None = None,
        max_retries: int | None = None,
    ):
        self.redis = redis_client
        self.key = KEY_PREFIX + name
        self.timeout_seconds = timeout_seconds or settings.LOCK_TIMEOUT_SECONDS
        self.retry_delay = (retry_delay_ms or settings.LOCK_RETRY_DELAY_MS) / 1000
        self.max_retries = max_retries or settings.LOCK_MAX_RETRIES
        self.token: str | None = None
        self._release = self.redis.register_script(RELEASE_IF_OWNER)

    async def _try_set(self, token: str) -> bool:
        return bool(
            await self.redis.set(self.key, token, nx=True, ex=self.timeout_seconds)
        )

    async def acquire(self, blocking: bool = True) -> bool:
        """
        Take the lock.

        With ``blocking`` the attempt is repeated every ``retry_delay``
        seconds, at most ``max_retries`` more times. Returns whether the
        lock is now held.
        """
        token = uuid.uuid4().hex
        attempts = 1 + (self.max_retries if blocking else 0)

        for attempt in range(attempts):
            if await self._try_set(token):
                self.token = token
                return True
            if attempt + 1 < attempts:
                await asyncio.sleep(self.retry_delay)

        return False

    async def release(self) -> bool:
        """Give the lock back. False when it had expired or was never held."""
        token, self.token = self.token, None
        if token is None:
            return False
        return bool(await self._release(keys=[self.key], args=[token]))

    async def is_locked(self) -> bool:
        """Whether anyone currently holds the key."""
        return bool(await self.redis.exists(self.key))


@asynccontextmanager
async def distributed_lock(
    redis_client: redis.Redis,
    name: str,
    timeout_seconds: int | None = None,
    blocking: bool = True,
) -> AsyncGenerator[DistributedLock, None]:
    """
    Hold ``name`` for the duration of the block.

        async with distributed_lock(redis_client, event_lock_key(event_id)):
            ...

    Raises:
        DistributedLockError: If the lock is still taken after all retries
    """
    lock = DistributedLock(redis_client, name, timeout_seconds)
    if not await lock.acquire(blocking=blocking):
        raise DistributedLockError(f"Lock {name} is held by another worker")

    try:
        yield lock
    finally:
        await lock.release()
