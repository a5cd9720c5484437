"""Sliding-window request throttle for the anonymous login and register endpoints."""

import threading
import time
from collections import deque
from collections.abc import Callable


class LoginThrottle:
    """
    Allow at most max_attempts requests per key within window_seconds.

    In-memory and per-process; a multi-instance deployment needs a shared
    store (e.g. Redis) instead. Keys whose attempts have all aged out are
    dropped, so the map only holds keys seen within the last window.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._attempts)

    def _prune(self, attempts: deque[float], now: float) -> None:
        while attempts and now - attempts[0] >= self.window_seconds:
            attempts.popleft()

    def _sweep(self, now: float) -> None:
        # At most once per window: drop every key with no attempt left inside it.
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for key in list(self._attempts):
            attempts = self._attempts[key]
            self._prune(attempts, now)
            if not attempts:
                del self._attempts[key]

    def hit(self, key: str) -> bool:
        """Record one attempt for key. Returns False when the key is over its limit."""
        now = self._clock()
        with self._lock:
            self._sweep(now)
            attempts = self._attempts.get(key)
            if attempts is None:
                attempts = self._attempts[key] = deque()
            else:
                self._prune(attempts, now)
            if len(attempts) >= self.max_attempts:
                return False
            attempts.append(now)
            return True

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._attempts.clear()
            else:
                self._attempts.pop(key, None)
