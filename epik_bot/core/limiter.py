"""Per-thread cooldown for mention replies.

Stops the bot from answering the same issue thread more than once per
cooldown window, e.g. when several people fire ``@epik status`` at once.

Built on the `limits` library (the engine behind SlowAPI) with a one-hit
moving window:

  - A key is allowed again once ``now - last_allowed >= window``. The
    moving window itself still counts a hit made exactly ``window`` ago, so
    such an entry is cleared before hitting.
  - A blocked hit is not recorded, so it never extends the window.
  - `MemoryStorage` expires entries once the window has passed, so the key
    space stays bounded by recent activity.

The limiter is process-local. It is created once by `create_app()` and
stored on ``app.state``; it does not coordinate across replicas.
"""

import logging
import threading
import time

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 30


def mention_key(owner: str, repo: str, issue_number: int) -> str:
    """Rate-limit key for one issue or pull-request thread."""
    return f"{owner}/{repo}#{issue_number}"


class MentionRateLimiter:
    """Allow at most one action per key within ``window_seconds``."""

    def __init__(self, window_seconds: int = DEFAULT_COOLDOWN_SECONDS) -> None:
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.window_seconds = window_seconds
        self._strategy = MovingWindowRateLimiter(MemoryStorage())
        self._item = RateLimitItemPerSecond(1, window_seconds, namespace="mention")
        # Check, clear and hit run as one step per limiter.
        self._lock = threading.Lock()

    def is_allowed(self, key: str) -> bool:
        """Return True and record the hit if ``key`` is outside its cooldown."""
        with self._lock:
            stats = self._strategy.get_window_stats(self._item, key)
            if stats.reset_time <= time.time():
                self._strategy.clear(self._item, key)
            allowed = self._strategy.hit(self._item, key)
        if not allowed:
            logger.debug("Cooldown active for %s", key)
        return allowed
