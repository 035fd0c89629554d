"""Pytest configuration and fixtures."""

import json

import pytest
import requests

from keptn_events.config import HandlerConfig
from keptn_events.services.event_handler import EventHandler


class FakeResponse:
    def __init__(self, status_code=200, body=b""):
        self.status_code = status_code
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode()
        elif isinstance(body, str):
            body = body.encode()
        self._body = body

    @property
    def content(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Stand-in for requests.Session that replays queued responses.

    Each queued item is a FakeResponse or an exception to raise from get().
    Every call is recorded as (url, headers, timeout).
    """

    def __init__(self, responses=()):
        self.responses = list(responses)
        self.calls = []
        self.verify = True
        self.cookies = requests.cookies.RequestsCookieJar()

    def queue(self, *responses):
        self.responses.extend(responses)

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if not self.responses:
            raise AssertionError(f"unexpected request: {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def urls(self):
        return [c[0] for c in self.calls]


def page(events, next_page_key="", **extra):
    """Body of one /event page."""
    body = {"events": events, "nextPageKey": next_page_key}
    body.update(extra)
    return FakeResponse(200, body)


def event(event_id, event_type="sh.keptn.event.deployment.triggered", **fields):
    return {"id": event_id, "type": event_type, **fields}


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def config(session):
    return HandlerConfig(
        base_url="keptn.example.com/api/mongodb-datastore",
        auth_token="secret",
        auth_header="x-token",
        session=session,
    )


@pytest.fixture
def handler(config):
    return EventHandler(config)


@pytest.fixture
def timeout_error():
    return requests.exceptions.ConnectTimeout("connect timed out")
