"""
HTTP sessions for attribution lookups: one pooled connection, GET-only retry,
CA bundle from the environment or certifi.

`http` is the shared session used by transport.perform_get when the caller
does not bring its own. A lookup is single-flight, so one pooled
connection per session is enough.
"""

import os

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import RETRY_TOTAL, RETRY_BACKOFF_FACTOR, RETRY_STATUS_CODES


def lookup_retry(total=RETRY_TOTAL):
    """Retry policy for idempotent lookups. Error statuses are returned, not raised."""
    return Retry(
        total=total,
        backoff_factor=RETRY_BACKOFF_FACTOR,
        status_forcelist=RETRY_STATUS_CODES,
        allowed_methods=["GET"],
        raise_on_status=False,
    )


def ca_bundle():
    env_ca = os.environ.get("REQUESTS_CA_BUNDLE") or os.environ.get("SSL_CERT_FILE")
    if env_ca and os.path.isfile(env_ca):
        return env_ca
    return certifi.where()


def create_session(retries=None):
    """A session with a single pooled connection per scheme and the lookup retry policy."""
    adapter = HTTPAdapter(
        pool_connections=1,
        pool_maxsize=1,
        max_retries=retries if retries is not None else lookup_retry(),
    )
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.verify = ca_bundle()
    return session


def reset_session(session):
    """Replace a session whose pooled connection went stale."""
    session.close()
    return create_session()


http = create_session()
