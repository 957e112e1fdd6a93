# core/utils/debounce.py
import time
from typing import Any, Callable, Optional, Tuple

DEFAULT_WAIT = 0.15


class Debouncer:
    """Coalesce rapid calls into one callback after a quiet period.

    Every `call` replaces the pending arguments and restarts the wait. The
    callback runs from `poll` once `wait` seconds have passed with no new
    call, or immediately from `flush`. The clock is injectable so the policy
    can be driven deterministically.
    """

    def __init__(self, callback: Callable[..., Any], wait: float = DEFAULT_WAIT,
                 clock: Callable[[], float] = time.monotonic):
        self.callback = callback
        self.wait = wait
        self.clock = clock
        self._pending: Optional[Tuple[tuple, dict]] = None
        self._due: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def call(self, *args, **kwargs) -> None:
        self._pending = (args, kwargs)
        self._due = self.clock() + self.wait

    def poll(self) -> bool:
        """Fire the pending call if its wait has elapsed. Returns True if it fired."""
        if self._pending is None or self.clock() < self._due:
            return False
        self._fire()
        return True

    def flush(self) -> bool:
        if self._pending is None:
            return False
        self._fire()
        return True

    def cancel(self) -> None:
        self._pending = None
        self._due = None

    def _fire(self) -> None:
        args, kwargs = self._pending
        self.cancel()
        self.callback(*args, **kwargs)
