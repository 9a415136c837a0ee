"""Quiescence-window debouncing for search input."""

import time
from typing import Callable, Optional

DEFAULT_DELAY = 0.5


class SearchDebouncer:
    """Holds raw keystrokes until the input has been still for *delay* seconds.

    ``push`` records the latest text; ``poll`` returns the trimmed text once
    the window has elapsed since the last push, and None otherwise. Each
    committed value is returned once.

    The clock is injectable so callers (and tests) can pass ``now``
    explicitly instead of sleeping.
    """

    def __init__(self, delay: float = DEFAULT_DELAY, clock: Callable[[], float] = time.monotonic):
        self.delay = delay
        self._clock = clock
        self._pending: Optional[str] = None
        self._last_input = 0.0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def push(self, text: str, now: Optional[float] = None) -> None:
        self._pending = text
        self._last_input = self._clock() if now is None else now

    def remaining(self, now: Optional[float] = None) -> float:
        """Seconds until the pending input may be committed (0.0 if none pending)."""
        if self._pending is None:
            return 0.0
        if now is None:
            now = self._clock()
        return max(0.0, self._last_input + self.delay - now)

    def poll(self, now: Optional[float] = None) -> Optional[str]:
        if self._pending is None or self.remaining(now) > 0:
            return None
        text, self._pending = self._pending, None
        return text.strip()
