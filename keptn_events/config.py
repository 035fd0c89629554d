"""Handler configuration for the event datastore client.

Everything the handler needs is carried on HandlerConfig and passed at
construction time; there are no package-level transport defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import requests

DATASTORE_SERVICE_PATH = "mongodb-datastore"
DEFAULT_AUTH_HEADER = "x-token"
DEFAULT_SCHEME = "http"
DEFAULT_TIMEOUT_S = 30.0

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class HandlerConfig:
    base_url: str                      # host[:port][/path], no scheme
    auth_token: str = ""
    auth_header: str = ""
    scheme: str = DEFAULT_SCHEME
    timeout: float | None = DEFAULT_TIMEOUT_S   # per request, seconds; None = no deadline
    verify_tls: bool = True            # False accepts self-signed certificates
    session: requests.Session | None = None


def normalize_base_url(base_url: str, datastore_suffix: bool = False) -> str:
    """Strip the scheme and trailing slashes from base_url.

    With datastore_suffix, '/mongodb-datastore' is appended unless the URL
    already ends with it.
    """
    for prefix in ("https://", "http://"):
        if base_url.startswith(prefix):
            base_url = base_url[len(prefix):]
            break
    base_url = base_url.rstrip("/")
    if datastore_suffix and not base_url.endswith(DATASTORE_SERVICE_PATH):
        base_url += "/" + DATASTORE_SERVICE_PATH
    return base_url


def load_config() -> HandlerConfig:
    """Build a HandlerConfig from environment variables.

    KEPTN_ENDPOINT                   base URL of the API (scheme optional)
    KEPTN_API_TOKEN                  auth token; no auth header is sent when unset
    KEPTN_AUTH_HEADER                header name for the token (default: x-token)
    KEPTN_SCHEME                     http or https; taken from KEPTN_ENDPOINT if omitted
    KEPTN_TIMEOUT                    per-request timeout in seconds (default: 30)
    KEPTN_INSECURE_SKIP_TLS_VERIFY   accept self-signed certificates

    Raises ValueError if KEPTN_TIMEOUT is not a number.
    """
    endpoint = os.getenv("KEPTN_ENDPOINT", "localhost:8080")
    scheme = os.getenv("KEPTN_SCHEME")
    if not scheme:
        scheme = "https" if endpoint.startswith("https://") else DEFAULT_SCHEME
    token = os.getenv("KEPTN_API_TOKEN", "")
    return HandlerConfig(
        base_url=normalize_base_url(endpoint, datastore_suffix=bool(token)),
        auth_token=token,
        auth_header=os.getenv("KEPTN_AUTH_HEADER", DEFAULT_AUTH_HEADER),
        scheme=scheme,
        timeout=float(os.getenv("KEPTN_TIMEOUT", DEFAULT_TIMEOUT_S)),
        verify_tls=os.getenv("KEPTN_INSECURE_SKIP_TLS_VERIFY", "").lower() not in _TRUTHY,
    )
