"""Per-key sliding-window rate limiting."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Callable

from staffbot.core.config import Settings
from staffbot.core.errors import BotError
from staffbot.core.keyed_store import KeyedStore

logger = logging.getLogger(__name__)


def _now_ms() -> float:
    return time.time() * 1000


class RateLimiter:
    """Counts accepted requests per key within the trailing ``window_ms``.

    Timestamps older than the window are pruned lazily on every check; the
    periodic ``cleanup`` evicts keys that have gone completely quiet.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_ms: int = 60_000,
        enabled: bool = True,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        self.max_requests = max_requests
        self.window_ms = window_ms
        self.enabled = enabled
        self.clock = clock
        self.requests: KeyedStore[list[float]] = KeyedStore()

    def configure(self, settings: Settings) -> None:
        self.enabled = settings.RATE_LIMIT_ENABLED
        self.max_requests = settings.RATE_LIMIT_MAX_REQUESTS
        self.window_ms = settings.RATE_LIMIT_WINDOW_MS

    async def check(self, key: str) -> None:
        """Record one request for ``key`` or raise a rate-limit ``BotError``."""
        if not self.enabled:
            return

        async with self.requests.locked(key):
            now = self.clock()
            timestamps = [ts for ts in self.requests.get(key) or [] if now - ts < self.window_ms]

            if len(timestamps) >= self.max_requests:
                self.requests.set(key, timestamps)
                retry_after = math.ceil((timestamps[0] + self.window_ms - now) / 1000)
                logger.info("Rate limit exceeded for %s (retry after %ds)", key, retry_after)
                raise BotError.rate_limit(max(retry_after, 1))

            timestamps.append(now)
            self.requests.set(key, timestamps)

    async def cleanup(self) -> int:
        now = self.clock()

        def _stale(_: str, timestamps: list[float]) -> bool:
            timestamps[:] = [ts for ts in timestamps if now - ts < self.window_ms]
            return not timestamps

        evicted = await self.requests.sweep(_stale)
        if evicted:
            logger.debug("Evicted %d idle rate-limit keys", evicted)
        return evicted

    async def run_cleanup_loop(self, interval_ms: int) -> None:
        while True:
            await asyncio.sleep(interval_ms / 1000)
            await self.cleanup()

    def reset(self) -> None:
        self.requests.clear()


rate_limiter = RateLimiter()
