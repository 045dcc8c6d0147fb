"""
Constants, endpoints, timeouts, and sentinel values.
"""

CORE_VERSION = "4.0.0"
CLIENT_SDK = "python" + CORE_VERSION

# ─── Endpoint ────────────────────────────────────────────────────
BASE_URL = "https://app.adjust.com"
ATTRIBUTION_PATH = "/attribution"

# ─── Network ─────────────────────────────────────────────────────
API_TIMEOUT_SEC = 60           # Connect + read, per attempt
RETRY_TOTAL = 3
RETRY_BACKOFF_FACTOR = 2       # Wait 2s, 4s, 8s between retries
RETRY_STATUS_CODES = [502, 503, 504]

# ─── Attribution polling ─────────────────────────────────────────
ATTRIBUTION_TIMER_NAME = "Attribution timer"
WORKER_THREAD_NAME = "attribution-worker"
ASK_IN_ABSENT = -1             # Server sent no "ask_in" field

# Fields copied from the "attribution" object of a response.
ATTRIBUTION_FIELDS = (
    "tracker_token",
    "tracker_name",
    "network",
    "campaign",
    "adgroup",
    "creative",
    "click_label",
    "adid",
)

# ─── Logging ─────────────────────────────────────────────────────
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 1_000_000
