"""Fixed-window request cap per client address, kept in process memory."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch seconds when the current window ends


class FixedWindowRateLimiter:
    """Counts requests per client in fixed windows of ``window_seconds``.

    Single event loop, no awaits between read and write: no lock needed.
    Windows are stored in the order they opened, so expired ones are
    evicted from the front on every hit and the table only holds clients
    seen within the last window.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}  # client -> (window_start, count)

    def hit(self, client_id: str) -> RateLimitDecision:
        """Record one request for ``client_id`` and decide whether it may proceed."""
        now = self._clock()
        self._evict_expired(now)

        # Anything still present is inside its window; new clients go last.
        start, count = self._windows.get(client_id, (now, 0))
        count += 1
        self._windows[client_id] = (start, count)
        return RateLimitDecision(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_at=start + self.window_seconds,
        )

    def _evict_expired(self, now: float) -> None:
        while self._windows:
            client_id, (start, _) = next(iter(self._windows.items()))
            if now - start < self.window_seconds:
                break
            del self._windows[client_id]
