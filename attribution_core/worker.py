"""
SerialExecutor: the one dedicated worker thread for attribution polling.

Tasks run strictly one at a time, in submission order. Delayed tasks are
handed to the worker through the same queue and kept in a heap that only
the worker thread touches, so a timer fire can never overlap other work.
"""

import heapq
import itertools
import queue
import threading
import time

from .config import log
from .constants import WORKER_THREAD_NAME

_STOP = object()


class ScheduledTask:
    """Handle for a submitted task. cancel() is honored until the task starts."""

    def __init__(self, fn, deadline=None):
        self.fn = fn
        self.deadline = deadline
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class SerialExecutor:

    def __init__(self, name=WORKER_THREAD_NAME, clock=time.monotonic):
        self.clock = clock
        self._queue = queue.Queue()
        self._delayed = []                # (deadline, seq, task), worker thread only
        self._seq = itertools.count()
        self._shutdown = False
        self._lock = threading.Lock()      # guards _shutdown against put-after-stop
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def submit(self, fn):
        """Queue `fn` to run as soon as the worker is free."""
        task = ScheduledTask(fn)
        self._put(task)
        return task

    def schedule(self, delay_sec, fn):
        """Queue `fn` to run no earlier than `delay_sec` from now."""
        task = ScheduledTask(fn, self.clock() + max(0.0, delay_sec))
        self._put(task)
        return task

    def _put(self, task):
        with self._lock:
            if self._shutdown:
                raise RuntimeError("executor has been shut down")
            self._queue.put(task)

    def shutdown(self, wait=True, timeout=None):
        """Stop accepting work; drop delayed tasks. Already-queued tasks still run."""
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
            self._queue.put(_STOP)
        if wait and threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    # ─── Worker loop ─────────────────────────────────────────

    def _run(self):
        while True:
            timeout = None
            if self._delayed:
                timeout = max(0.0, self._delayed[0][0] - self.clock())
            try:
                item = self._queue.get(timeout=timeout)
            except queue.Empty:
                item = None

            if item is _STOP:
                self._delayed.clear()
                break

            if item is not None:
                if item.deadline is None:
                    self._execute(item)
                else:
                    heapq.heappush(self._delayed, (item.deadline, next(self._seq), item))

            now = self.clock()
            while self._delayed and self._delayed[0][0] <= now:
                _, _, task = heapq.heappop(self._delayed)
                self._execute(task)

        log.debug("%s stopped", self._thread.name)

    @staticmethod
    def _execute(task):
        if task.cancelled:
            return
        try:
            task.fn()
        except Exception as e:
            log.error("Attribution worker task failed: %s", e, exc_info=True)
