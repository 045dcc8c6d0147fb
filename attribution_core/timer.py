"""
TimerOnce: single-shot, re-armable delay that fires on the serial executor.
"""

from .config import log
from .constants import ATTRIBUTION_TIMER_NAME


class TimerOnce:
    """
    Holds at most one pending arm. start_in() replaces any pending arm;
    the callback runs once per arm, on the executor's worker thread.
    """

    def __init__(self, executor, callback, name=ATTRIBUTION_TIMER_NAME):
        if executor is None or executor.is_shutdown:
            raise RuntimeError("%s needs a running executor" % name)
        self._executor = executor
        self._callback = callback
        self.name = name
        self._task = None
        self._deadline = None

    def start_in(self, delay_ms):
        self.cancel()
        delay_sec = max(0, delay_ms) / 1000.0
        self._deadline = self._executor.clock() + delay_sec
        self._task = self._executor.schedule(delay_sec, self._fire)
        log.debug("%s starting in %.3f seconds", self.name, delay_sec)

    def get_fire_in(self) -> int:
        """Milliseconds until the pending arm fires, 0 when idle."""
        if self._deadline is None:
            return 0
        remaining = self._deadline - self._executor.clock()
        return max(0, int(round(remaining * 1000)))

    def is_pending(self) -> bool:
        return self._task is not None

    def cancel(self):
        if self._task is not None:
            self._task.cancel()
            log.debug("%s canceled", self.name)
        self._task = None
        self._deadline = None

    def _fire(self):
        self._task = None
        self._deadline = None
        log.debug("%s fired", self.name)
        self._callback()
