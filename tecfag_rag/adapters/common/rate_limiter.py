"""Token-bucket rate limiter for external API calls."""

from __future__ import annotations

import asyncio
import time


class AsyncRateLimiter:
    """Token-bucket rate limiter with minute-based capacity.

    Keeps concurrent embedding and completion calls within provider quotas.
    A ``requests_per_minute`` value of ``None`` or ``<=0`` disables limiting.
    """

    def __init__(self, requests_per_minute: int | None) -> None:
        self.capacity = requests_per_minute if requests_per_minute and requests_per_minute > 0 else None
        self.tokens = float(self.capacity) if self.capacity else None
        self.refill_interval = 60.0 / self.capacity if self.capacity else None
        self.last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.capacity is not None

    def _refill(self) -> None:
        if self.capacity is None or self.refill_interval is None or self.tokens is None:
            return

        elapsed = time.monotonic() - self.last_refill
        tokens_to_add = int(elapsed // self.refill_interval)
        if tokens_to_add > 0:
            self.tokens = min(float(self.capacity), self.tokens + tokens_to_add)
            self.last_refill += tokens_to_add * self.refill_interval

    async def acquire(self) -> None:
        """Wait until a token is available or limiting is disabled."""
        if self.capacity is None or self.refill_interval is None or self.tokens is None:
            return

        while True:
            async with self._lock:
                self._refill()
                if self.tokens >= 1:
                    self.tokens -= 1
                    return
                wait_time = max(self.refill_interval - (time.monotonic() - self.last_refill), 0.0)

            # Sleep outside the lock so other tasks can refill and proceed
            await asyncio.sleep(wait_time if wait_time > 0 else self.refill_interval)
