"""
Logging setup, verbose log level, and config load.
"""

import json
import sys
import logging
from pathlib import Path

from .constants import (
    BASE_URL, CLIENT_SDK, API_TIMEOUT_SEC,
    LOG_FORMAT, LOG_DATE_FORMAT, LOG_MAX_BYTES,
)


# ─── Logging ─────────────────────────────────────────────────────

VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

log = logging.getLogger("attribution")


def setup_logging(log_file=None, level="INFO"):
    """Attach a stdout handler and, optionally, a file handler to `log`."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    log.setLevel(level)

    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    log.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        try:
            if log_path.exists() and log_path.stat().st_size > LOG_MAX_BYTES:
                log_path.write_text("")
        except OSError:
            pass
        file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    return log


# ─── Config Management ──────────────────────────────────────────

DEFAULT_CONFIG = {
    "baseUrl": BASE_URL,
    "appToken": None,
    "environment": "sandbox",
    "clientSdk": CLIENT_SDK,
    "timeoutSec": API_TIMEOUT_SEC,
    "logLevel": "INFO",
    "logFile": None,
}


def load_config(path):
    """Load config from disk, merged over DEFAULT_CONFIG. Returns dict or None."""
    config_file = Path(path)
    if not config_file.exists():
        return None
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Config at %s is unreadable: %s", config_file, e)
        return None
    if not isinstance(data, dict):
        log.warning("Config at %s is not a JSON object", config_file)
        return None

    config = dict(DEFAULT_CONFIG)
    config.update(data)
    return config
