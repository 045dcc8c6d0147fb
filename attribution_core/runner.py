"""
One-shot attribution lookup: load config, ask once, wait for the answer.

Usage:
    python -m attribution_core.runner path/to/config.json
"""

import sys
import threading

from .config import log, load_config, setup_logging, DEFAULT_CONFIG
from .constants import CORE_VERSION, ATTRIBUTION_PATH
from .package import AttributionPackage
from .activity import ActivityState
from .coordinator import AttributionHandler
from . import http_client
from . import transport


def build_package(config):
    """Attribution package for the configured app."""
    return AttributionPackage.create(
        {
            "app_token": config.get("appToken"),
            "environment": config.get("environment"),
        },
        path=ATTRIBUTION_PATH,
        client_sdk=config.get("clientSdk") or DEFAULT_CONFIG["clientSdk"],
    )


def run_once(config, timeout=30.0, transport_fn=None):
    """
    Request a single lookup. Returns the delivered Attribution, or None once
    `timeout` seconds pass. Never waits on a GET still in flight at timeout.
    """
    delivered = threading.Event()
    state = ActivityState(on_attribution_changed=lambda attribution: delivered.set())

    timeout_sec = config.get("timeoutSec", DEFAULT_CONFIG["timeoutSec"])
    session = None
    if transport_fn is None:
        session = http_client.create_session()

        def transport_fn(url, params, client_sdk, activity_kind):
            return transport.perform_get(url, params, client_sdk, activity_kind,
                                         timeout=timeout_sec, session=session)

    handler = AttributionHandler(
        state,
        build_package(config),
        starts_sending=True,
        has_listener=True,
        transport=transport_fn,
        base_url=config.get("baseUrl") or DEFAULT_CONFIG["baseUrl"],
    )
    try:
        handler.request_lookup()
        if not delivered.wait(timeout):
            log.warning("No attribution within %.1fs (asking=%s, last url=%s)",
                        timeout, state.asking_attribution, handler.last_url_used)
            return None
        return state.attribution
    finally:
        # a timed-out GET keeps running on the daemon worker; don't join it
        finished = delivered.is_set()
        handler.teardown(wait=finished)
        if session is not None and finished:
            session.close()


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("usage: python -m attribution_core.runner CONFIG_JSON", file=sys.stderr)
        return 2

    config = load_config(argv[0])
    if not config:
        print("Config not found or invalid: %s" % argv[0], file=sys.stderr)
        return 2

    setup_logging(config.get("logFile"), config.get("logLevel", "INFO"))
    log.info("attribution_core v%s", CORE_VERSION)

    if not config.get("appToken"):
        log.error("Config is missing appToken")
        return 2

    attribution = run_once(config)
    if attribution is None:
        return 1
    log.info("Attribution: %s", attribution.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
