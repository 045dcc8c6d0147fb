"""
AttributionHandler: decides when to ask the server for attribution and
reconciles the answer with the activity state.

Every public method only enqueues work on the handler's SerialExecutor.
All state below (paused, has_listener, package, timer, last_url_used) is
read and written from that one worker thread, so no locks are needed.
"""

import time

from .config import log, VERBOSE
from .constants import BASE_URL, ATTRIBUTION_TIMER_NAME
from .package import ActivityKind, build_params, build_url
from .responses import check_attribution
from .timer import TimerOnce
from .worker import SerialExecutor
from . import transport as default_transport


class AttributionHandler:
    """
    Lookup cycle: idle → scheduled → in flight → rescheduled (ask_in) or
    delivered → idle.

    `activity_handler` must provide set_asking_attribution(bool),
    launch_session_response_tasks(response_data) and
    launch_attribution_response_tasks(response_data).
    """

    def __init__(self, activity_handler, attribution_package, starts_sending=True,
                 has_listener=True, executor=None, transport=None, base_url=BASE_URL,
                 clock=time.monotonic):
        self._owns_executor = executor is None
        self._executor = executor or SerialExecutor(clock=clock)
        self._transport = transport or default_transport.perform_get
        self._base_url = base_url
        self._timer = None
        self.last_url_used = None  # diagnostics only, read without synchronization

        try:
            self._timer = TimerOnce(self._executor, self._get_attribution_internal,
                                    ATTRIBUTION_TIMER_NAME)
        except RuntimeError as e:
            log.error("Timer not initialized, attribution handler is disabled (%s)", e)

        self._init_internal(activity_handler, attribution_package, starts_sending, has_listener)

    # ─── Public API (any thread) ─────────────────────────────

    def init(self, activity_handler, attribution_package, starts_sending, has_listener):
        self._submit(lambda: self._init_internal(
            activity_handler, attribution_package, starts_sending, has_listener))

    def request_lookup(self, delay_ms=0):
        """Ask for a lookup in `delay_ms`, unless one is already due sooner."""
        self._submit(lambda: self._request_lookup(delay_ms))

    def pause(self):
        self._submit(self._set_paused, True)

    def resume(self):
        self._submit(self._set_paused, False)

    def on_session_response(self, response_data):
        self._submit(self._check_session_response_internal, response_data)

    def on_attribution_response(self, response_data):
        self._submit(self._check_attribution_response_internal, response_data)

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def has_listener(self) -> bool:
        return self._has_listener

    def teardown(self, wait=True, timeout=None):
        """
        Drop any pending lookup and stop the worker this handler created.
        With wait=False an in-flight GET finishes on the daemon worker after
        this returns; its result is discarded.
        """
        if self._executor.is_shutdown:
            return
        if self._timer is not None:
            self._submit(self._timer.cancel)
        if self._owns_executor:
            self._executor.shutdown(wait=wait, timeout=timeout)

    # ─── Worker thread only ──────────────────────────────────

    def _submit(self, fn, *args):
        try:
            self._executor.submit(lambda: fn(*args))
        except RuntimeError as e:
            log.warning("Attribution handler dropped a call: %s", e)

    def _init_internal(self, activity_handler, attribution_package, starts_sending, has_listener):
        self._activity_handler = activity_handler
        self._package = attribution_package
        self._paused = not starts_sending
        self._has_listener = has_listener

    def _set_paused(self, paused):
        self._paused = paused

    def _request_lookup(self, delay_ms):
        if self._timer is None:
            return

        # keep the pending arm if it fires no later than the new request
        if self._timer.is_pending() and self._timer.get_fire_in() <= delay_ms:
            return

        if delay_ms > 0:
            log.debug("Waiting to query attribution in %.1f seconds", delay_ms / 1000.0)

        self._timer.start_in(delay_ms)

    def _check_attribution_internal(self, response_data):
        if response_data.json_response is None:
            return False

        ask_in = check_attribution(response_data)
        if ask_in is not None:
            self._activity_handler.set_asking_attribution(True)
            self._request_lookup(ask_in)
            return True

        self._activity_handler.set_asking_attribution(False)
        return False

    def _check_session_response_internal(self, response_data):
        if self._check_attribution_internal(response_data):
            return
        self._activity_handler.launch_session_response_tasks(response_data)

    def _check_attribution_response_internal(self, response_data):
        if self._check_attribution_internal(response_data):
            return
        self._activity_handler.launch_attribution_response_tasks(response_data)

    def _get_attribution_internal(self):
        if not self._has_listener:
            return

        if self._paused:
            log.debug("Attribution handler is paused")
            return

        package = self._package
        log.log(VERBOSE, "%s", package.extended_string())

        try:
            url = build_url(self._base_url, package.path)
            params = build_params(package)
            response_data = self._transport(url, params, package.client_sdk,
                                            package.activity_kind)
            self.last_url_used = response_data.url or url
        except Exception as e:
            log.error("Failed to get attribution (%s)", e)
            return

        if response_data.activity_kind is not ActivityKind.ATTRIBUTION:
            return

        self._check_attribution_response_internal(response_data)
