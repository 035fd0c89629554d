"""Request building shared by every API handler.

Usage:
    from keptn_events.auth import build_session     # requests.Session for a HandlerConfig
    from keptn_events.auth import request_headers   # JSON + auth headers for one request
"""

from __future__ import annotations

import http.cookiejar
import logging

import requests
import urllib3

from keptn_events.config import HandlerConfig

logger = logging.getLogger(__name__)


def build_session(config: HandlerConfig) -> requests.Session:
    """Return the transport for a handler, configured once at construction.

    A session supplied on the config is reused; otherwise a new one is made.
    TLS verification follows config.verify_tls. The cookie jar accepts no
    cookies, so nothing set by one response is sent on a later call.
    """
    session = config.session if config.session is not None else requests.Session()
    session.cookies.set_policy(http.cookiejar.DefaultCookiePolicy(allowed_domains=[]))
    session.verify = config.verify_tls
    if not config.verify_tls:
        logger.warning("TLS certificate verification disabled for %s", config.base_url)
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    return session


def request_headers(config: HandlerConfig) -> dict[str, str]:
    """JSON content type plus the auth header, when both name and token are set."""
    headers = {"Content-Type": "application/json"}
    if config.auth_header and config.auth_token:
        headers[config.auth_header] = config.auth_token
    return headers
