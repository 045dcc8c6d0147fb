"""
attribution_core: attribution polling for the client SDK
========================================================
Architecture: one dedicated worker thread owns all polling state. No locks.

  constants.py    → Version, endpoint, timeouts, sentinels
  config.py       → Logging (plus VERBOSE level), config load
  http_client.py  → HTTP session with retry/pooling + CA bundle
  package.py      → AttributionPackage, sent_at, URL/params building
  responses.py    → ResponseData, Attribution, ask_in classifier
  transport.py    → perform_get (blocking GET → ResponseData)
  worker.py       → SerialExecutor (FIFO queue + delayed tasks, one thread)
  timer.py        → TimerOnce (re-armable single-shot on the executor)
  coordinator.py  → AttributionHandler (debounce, single-flight, pause)
  activity.py     → ActivityState (asking flag, current attribution)
  runner.py       → One-shot lookup entry point
"""

from .package import ActivityKind, AttributionPackage
from .responses import Attribution, ResponseData, check_attribution
from .coordinator import AttributionHandler
from .activity import ActivityState

__all__ = [
    "ActivityKind",
    "AttributionPackage",
    "Attribution",
    "ResponseData",
    "check_attribution",
    "AttributionHandler",
    "ActivityState",
]
