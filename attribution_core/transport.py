"""
Outbound GET for attribution lookups.

Blocking; runs on the attribution worker thread. Connection, TLS and
timeout errors propagate as requests.RequestException to the caller.
"""

import requests

from .config import log
from .constants import API_TIMEOUT_SEC
from .package import ActivityKind
from .responses import ResponseData
from . import http_client


def perform_get(url, params, client_sdk, activity_kind=ActivityKind.ATTRIBUTION,
                timeout=API_TIMEOUT_SEC, session=None):
    """
    GET `url` with ordered `params`. Returns a ResponseData tagged with `activity_kind`.

    Uses the shared module session unless the caller passes its own; only
    the shared one is rebuilt after a connection error.
    """
    headers = {"Client-SDK": client_sdk}
    if session is not None:
        resp = session.get(url, params=params, headers=headers, timeout=timeout)
    else:
        try:
            resp = http_client.http.get(url, params=params, headers=headers, timeout=timeout)
        except requests.ConnectionError:
            http_client.http = http_client.reset_session(http_client.http)
            raise

    response_data = ResponseData(
        activity_kind=activity_kind,
        status_code=resp.status_code,
        url=resp.url,
    )

    try:
        data = resp.json()
    except ValueError:
        log.error("Failed to parse json response: %s", resp.text[:200])
        return response_data

    if not isinstance(data, dict):
        log.error("Unexpected json response: %s", resp.text[:200])
        return response_data

    response_data.json_response = data
    response_data.message = data.get("message")

    if 200 <= resp.status_code < 300:
        if response_data.message:
            log.info("%s", response_data.message)
        else:
            log.info("No message found")
    else:
        log.error("HTTP %d: %s", resp.status_code,
                  data.get("error") or response_data.message or "no error message")

    return response_data
