"""
Best-effort per-client throttling.

In-memory only: counts reset when the process restarts and are not shared
between workers. Advisory, not a security control.
"""
import threading
import time
from collections import deque


class SlidingWindowRateLimiter:
    def __init__(self, max_requests: int, window_seconds: float = 60.0, clock=time.monotonic):
        self.max_requests   = max_requests
        self.window_seconds = window_seconds
        self._clock         = clock
        self._hits: dict[str, deque] = {}
        self._last_sweep    = clock()
        self._lock          = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.max_requests > 0

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def is_allowed(self, client_id: str) -> bool:
        """Record a request for client_id and return False once over quota."""
        if not self.enabled:
            return True
        now = self._clock()
        window_start = now - self.window_seconds
        with self._lock:
            # Forget clients idle for a whole window
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(window_start)
                self._last_sweep = now
            hits = self._hits.setdefault(client_id, deque())
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def _sweep(self, window_start: float) -> None:
        idle = [cid for cid, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for cid in idle:
            del self._hits[cid]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def client_id_from_headers(headers, remote_addr: str | None = None) -> str:
    """Identify the caller by edge-supplied IP headers, then the socket address."""
    cf_ip = headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip.strip()
    forwarded = headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return remote_addr or "unknown"
