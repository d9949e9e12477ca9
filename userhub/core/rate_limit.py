"""Fixed-window request limiter keyed by route name and client IP."""

import threading
import time
from dataclasses import dataclass

from starlette.requests import Request

# Expired windows are dropped at most this often.
SWEEP_INTERVAL_SEC = 60.0


@dataclass
class _Window:
    started_at: float
    length: float
    count: int = 0

    def expired(self, now: float) -> bool:
        return now - self.started_at >= self.length


class RateLimiter:
    """
    In-process fixed-window counters.

    Counters live in this process only; behind several workers each worker
    enforces its own window. Windows that have run out are swept on a later
    hit, so memory tracks the clients active within the longest window.
    """

    def __init__(self, sweep_interval_sec: float = SWEEP_INTERVAL_SEC) -> None:
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._sweep_interval = sweep_interval_sec
        self._last_sweep = time.monotonic()

    def hit(self, key: str, limit: int, window_sec: float) -> tuple[bool, int]:
        """
        Count one request for key.

        Returns (allowed, retry_after_seconds); retry_after is 0 when allowed.
        """
        now = time.monotonic()
        with self._lock:
            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)
            window = self._windows.get(key)
            if window is None or window.expired(now):
                window = _Window(started_at=now, length=window_sec)
                self._windows[key] = window
            if window.count >= limit:
                retry_after = int(window.started_at + window.length - now) + 1
                return False, retry_after
            window.count += 1
            return True, 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock.
        stale = [key for key, window in self._windows.items() if window.expired(now)]
        for key in stale:
            del self._windows[key]
        self._last_sweep = now

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep = time.monotonic()


limiter = RateLimiter()


def client_ip(request: Request) -> str:
    """First X-Forwarded-For entry when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
