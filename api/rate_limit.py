from collections import deque
from dataclasses import dataclass
from time import monotonic
from typing import Callable

from errors import RateLimitError


@dataclass(frozen=True)
class Limit:
    per_window: int
    window_seconds: int


class RateLimiter:
    """In-memory sliding-window limiter keyed by (user, action).

    State lives in one process; a multi-worker deployment gets one budget per
    worker.
    """

    def __init__(self, limits: dict[str, Limit], clock: Callable[[], float] = monotonic):
        self._limits = limits
        self._clock = clock
        self._buckets: dict[tuple[str, str], deque[float]] = {}

    def check(self, user_id: str, action: str) -> tuple[bool, int]:
        """Return (allowed, retry_after_seconds) and record the hit when allowed."""
        limit = self._limits.get(action)
        if limit is None:
            return True, 0

        now = self._clock()
        bucket = self._buckets.setdefault((user_id, action), deque())
        window_start = now - limit.window_seconds

        while bucket and bucket[0] <= window_start:
            bucket.popleft()

        if len(bucket) >= limit.per_window:
            retry_after = int(limit.window_seconds - (now - bucket[0])) + 1
            return False, max(retry_after, 1)

        bucket.append(now)
        return True, 0

    def enforce(self, user_id: str, action: str) -> None:
        allowed, retry_after = self.check(user_id, action)
        if not allowed:
            raise RateLimitError(action, retry_after)
