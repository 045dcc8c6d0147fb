"""
ActivityState: the activity-side state the attribution handler reports into.

Owns the asking-attribution flag and the current attribution. Called only
from the attribution worker thread.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from .config import log
from .responses import Attribution


@dataclass
class ActivityState:
    asking_attribution: bool = False
    attribution: Optional[Attribution] = None
    on_attribution_changed: Optional[Callable[[Attribution], None]] = None

    def set_asking_attribution(self, asking: bool):
        self.asking_attribution = asking

    def update_attribution(self, attribution) -> bool:
        """Store a new attribution. Returns True if it differs from the current one."""
        if attribution is None or attribution == self.attribution:
            return False
        self.attribution = attribution
        log.info("Attribution updated: %s", attribution.to_dict())
        return True

    def launch_session_response_tasks(self, response_data):
        self._launch_attribution_listener(response_data)

    def launch_attribution_response_tasks(self, response_data):
        self._launch_attribution_listener(response_data)

    def _launch_attribution_listener(self, response_data):
        if not self.update_attribution(response_data.attribution):
            return
        if self.on_attribution_changed is None:
            return
        try:
            self.on_attribution_changed(self.attribution)
        except Exception as e:
            log.error("Attribution listener raised: %s", e, exc_info=True)
