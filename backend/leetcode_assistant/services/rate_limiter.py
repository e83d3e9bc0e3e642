"""In memory sliding window rate limiter for chat requests."""

import math
import time
from collections import deque
from dataclasses import dataclass

from leetcode_assistant.config import settings

WINDOW_SECONDS = 60.0


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    # "client" or "global" when rejected.
    scope: str | None = None
    retry_after: int = 0


class RateLimiter:
    """Admit chat requests against per client and global per-minute budgets."""

    def __init__(self) -> None:
        self._client_windows: dict[str, deque[float]] = {}
        self._global_window: deque[float] = deque()

    def _prune(self, window: deque[float], now: float) -> None:
        cutoff = now - WINDOW_SECONDS
        while window and window[0] < cutoff:
            window.popleft()

    @staticmethod
    def _retry_after(window: deque[float], now: float) -> int:
        """Seconds until the oldest request in a full window expires."""
        return max(1, math.ceil(window[0] + WINDOW_SECONDS - now))

    def admit(self, client_id: str, now: float | None = None) -> RateDecision:
        """Check both budgets and record the request when it is admitted."""
        now = time.monotonic() if now is None else now

        window = self._client_windows.get(client_id)
        if window is not None:
            self._prune(window, now)
            if not window:
                del self._client_windows[client_id]
                window = None
        if window is not None and len(window) >= settings.rate_limit_client_per_minute:
            return RateDecision(False, "client", self._retry_after(window, now))

        self._prune(self._global_window, now)
        if len(self._global_window) >= settings.rate_limit_global_per_minute:
            return RateDecision(False, "global", self._retry_after(self._global_window, now))

        self._client_windows.setdefault(client_id, deque()).append(now)
        self._global_window.append(now)
        return RateDecision(True)

    def reset(self) -> None:
        self._client_windows.clear()
        self._global_window.clear()


# Single instance shared across the application.
rate_limiter = RateLimiter()
