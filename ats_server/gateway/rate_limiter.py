"""Sliding-window rate limiter keyed by caller-defined strings.

Each key (typically ``"<endpoint>:<user_id>"``) keeps the timestamps of the
calls admitted within the trailing window. When the window is full the
caller gets the number of seconds until the oldest call expires.

State is process-local and is lost on restart. The check is a single
synchronous read-modify-write, so no lock is needed on the event loop.
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from ats_server.gateway.types import RateLimitDecision

logger = logging.getLogger(__name__)

# Drained keys are swept after this many checks
SWEEP_EVERY = 1000


@dataclass
class _KeyWindow:
    """Admitted call timestamps for a single key."""

    window: float  # seconds, from the most recent check
    entries: deque[float] = field(default_factory=deque)

    def prune(self, now: float) -> None:
        cutoff = now - self.window
        while self.entries and self.entries[0] <= cutoff:
            self.entries.popleft()

    def drained(self, now: float) -> bool:
        return not self.entries or self.entries[-1] <= now - self.window


class SlidingWindowRateLimiter:
    """Per-key trailing-window admission control.

    Usage:
        limiter = SlidingWindowRateLimiter()

        decision = limiter.check_limit(f"resume:{user_id}", 5, 60_000)
        if not decision.ok:
            # respond 429 with Retry-After: decision.retry_after_sec
            ...
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, sweep_every: int = SWEEP_EVERY):
        self._clock = clock
        self._sweep_every = sweep_every
        self._checks = 0
        self._keys: dict[str, _KeyWindow] = {}

    def check_limit(self, key: str, max_calls: int, window_ms: int) -> RateLimitDecision:
        """Admit and record the call, or reject it with a retry-after hint."""
        now = self._clock()
        window = window_ms / 1000.0

        self._checks += 1
        if self._sweep_every and self._checks % self._sweep_every == 0:
            self.sweep()

        bucket = self._keys.get(key)
        if bucket is None:
            bucket = self._keys[key] = _KeyWindow(window=window)
        bucket.window = window
        bucket.prune(now)

        if len(bucket.entries) >= max_calls:
            if not bucket.entries:
                # max_calls <= 0: nothing is ever admitted
                return RateLimitDecision(ok=False, retry_after_sec=math.ceil(window))
            wait = (bucket.entries[0] + window) - now
            retry_after = max(0, math.ceil(wait))
            logger.debug("Rate limit hit for %s, retry after %ds", key, retry_after)
            return RateLimitDecision(ok=False, retry_after_sec=retry_after)

        bucket.entries.append(now)
        return RateLimitDecision(ok=True)

    def sweep(self) -> int:
        """Drop keys whose windows have fully drained. Returns the number dropped."""
        now = self._clock()
        stale = [key for key, bucket in self._keys.items() if bucket.drained(now)]
        for key in stale:
            del self._keys[key]
        return len(stale)

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when ``key`` is None."""
        if key is None:
            self._keys.clear()
        else:
            self._keys.pop(key, None)

    def get_stats(self, key: str) -> dict:
        """Current usage for a key."""
        bucket = self._keys.get(key)
        if bucket is None:
            return {"key": key, "calls_in_window": 0, "window_ms": None}
        bucket.prune(self._clock())
        return {
            "key": key,
            "calls_in_window": len(bucket.entries),
            "window_ms": int(bucket.window * 1000),
        }

    def __len__(self) -> int:
        return len(self._keys)
