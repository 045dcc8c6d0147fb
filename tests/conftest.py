"""
Shared fixtures: a manual executor with a fake monotonic clock, a
recording activity handler, and a scripted transport.
"""

import heapq
import itertools
from collections import deque

import pytest

from attribution_core.config import log
from attribution_core.package import ActivityKind, AttributionPackage
from attribution_core.responses import ResponseData
from attribution_core.worker import ScheduledTask


class ManualExecutor:
    """Executor driven by the test: run_pending() and advance(ms) instead of a thread."""

    def __init__(self):
        self.now_ms = 0
        self.is_shutdown = False
        self._ready = deque()
        self._delayed = []
        self._seq = itertools.count()

    def clock(self):
        return self.now_ms / 1000.0

    def submit(self, fn):
        if self.is_shutdown:
            raise RuntimeError("executor has been shut down")
        task = ScheduledTask(fn)
        self._ready.append(task)
        return task

    def schedule(self, delay_sec, fn):
        if self.is_shutdown:
            raise RuntimeError("executor has been shut down")
        task = ScheduledTask(fn, self.now_ms + max(0, int(round(delay_sec * 1000))))
        heapq.heappush(self._delayed, (task.deadline, next(self._seq), task))
        return task

    def shutdown(self, wait=True, timeout=None):
        self.is_shutdown = True
        self._delayed.clear()

    def run_pending(self):
        while True:
            if self._ready:
                task = self._ready.popleft()
            elif self._delayed and self._delayed[0][0] <= self.now_ms:
                task = heapq.heappop(self._delayed)[2]
            else:
                return
            if not task.cancelled:
                task.fn()

    def advance(self, ms):
        target = self.now_ms + ms
        self.run_pending()
        while self._delayed and self._delayed[0][0] <= target:
            self.now_ms = max(self.now_ms, self._delayed[0][0])
            self.run_pending()
        self.now_ms = target
        self.run_pending()


class RecordingActivity:
    def __init__(self):
        self.events = []

    def set_asking_attribution(self, asking):
        self.events.append(("asking", asking))

    def launch_session_response_tasks(self, response_data):
        self.events.append(("session", response_data))

    def launch_attribution_response_tasks(self, response_data):
        self.events.append(("attribution", response_data))

    def launched(self):
        return [e for e in self.events if e[0] in ("session", "attribution")]


class ScriptedTransport:
    """Records each GET; answers with the queued responses (or raises queued exceptions)."""

    def __init__(self):
        self.calls = []
        self.responses = deque()

    def reply(self, json_response=None, activity_kind=ActivityKind.ATTRIBUTION):
        self.responses.append(ResponseData(activity_kind=activity_kind,
                                           json_response=json_response))

    def fail(self, exc):
        self.responses.append(exc)

    def __call__(self, url, params, client_sdk, activity_kind):
        self.calls.append((url, list(params), client_sdk, activity_kind))
        item = self.responses.popleft() if self.responses else ResponseData(
            activity_kind=activity_kind, json_response={})
        if isinstance(item, Exception):
            raise item
        if item.url is None:
            item.url = url
        return item


@pytest.fixture
def executor():
    return ManualExecutor()


@pytest.fixture
def activity():
    return RecordingActivity()


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def attribution_package():
    return AttributionPackage.create(
        [("app_token", "abc123"), ("environment", "sandbox")],
        client_sdk="python4.0.0",
    )


@pytest.fixture
def restore_logger():
    handlers = list(log.handlers)
    level = log.level
    yield log
    for handler in list(log.handlers):
        if handler not in handlers:
            log.removeHandler(handler)
            handler.close()
    log.setLevel(level)
