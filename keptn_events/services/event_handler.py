"""Event datastore handler: GET /event with cursor pagination.

The server pages results with `nextPageKey`. Each response carries the key of
the following page; an empty key or "0" means there are no more pages.

    handler = new_authenticated_event_handler("keptn.example.com/api", token, "x-token")
    result = handler.get_events(EventFilter(project="sockshop", event_type=...))
    if result.error:
        ...
    for event in result.events:
        ...

get_events() never raises for transport, HTTP or decode failures. It returns
an EventsResult holding either every event from every page, or the first
error. Records gathered before a failure are discarded.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.parse
from dataclasses import dataclass

import requests

from keptn_events.auth import build_session, request_headers
from keptn_events.config import DEFAULT_SCHEME, HandlerConfig, normalize_base_url
from keptn_events.models import Error, Events, KeptnContextExtendedCE

logger = logging.getLogger(__name__)

NEXT_PAGE_KEY_PARAM = "nextPageKey"
_LAST_PAGE_KEYS = ("", "0")


class KeptnEventsError(Exception):
    """Base class for exceptions raised by this package."""


class EventsAPIError(KeptnEventsError):
    """Raised by EventsResult.unwrap() when the fetch failed."""

    def __init__(self, error: Error):
        super().__init__(str(error))
        self.error = error


class EventsNotFoundError(KeptnEventsError):
    """Raised when get_events_with_retry() finds no matching event."""


@dataclass(frozen=True)
class EventFilter:
    """Optional constraints on the events returned. Unset fields send nothing."""

    project: str = ""
    stage: str = ""
    service: str = ""
    event_type: str = ""
    keptn_context: str = ""
    event_id: str = ""
    page_size: str = ""
    number_of_pages: int = 0   # <= 0: follow the cursor until the server stops

    def query_params(self) -> dict[str, str]:
        params = {
            "project": self.project,
            "stage": self.stage,
            "service": self.service,
            "keptnContext": self.keptn_context,
            "eventID": self.event_id,
            "type": self.event_type,
            "pageSize": self.page_size,
        }
        return {k: v for k, v in params.items() if v}


@dataclass(frozen=True)
class EventsResult:
    """Either the full event list or an error, never both."""

    events: list[KeptnContextExtendedCE] | None = None
    error: Error | None = None

    def __post_init__(self) -> None:
        if (self.events is None) == (self.error is None):
            raise ValueError("EventsResult needs exactly one of events or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[KeptnContextExtendedCE]:
        if self.error is not None:
            raise EventsAPIError(self.error)
        return self.events  # type: ignore[return-value]

    @classmethod
    def failure(cls, message: str) -> EventsResult:
        return cls(error=Error.from_message(message))


class EventHandler:
    """Client for the datastore's /event endpoint."""

    def __init__(self, config: HandlerConfig):
        self.config = config
        self.session = build_session(config)

    def events_url(self, event_filter: EventFilter) -> str:
        """Base locator for a query: scheme, host, /event and the filter params."""
        url = f"{self.config.scheme}://{self.config.base_url}/event"
        params = event_filter.query_params()
        if params:
            url += "?" + urllib.parse.urlencode(sorted(params.items()))
        return url

    def get_events(self, event_filter: EventFilter) -> EventsResult:
        """Return all events matching event_filter, following nextPageKey."""
        return self._get_events(self.events_url(event_filter), event_filter.number_of_pages)

    def get_events_with_retry(
        self,
        event_filter: EventFilter,
        max_retries: int,
        retry_sleep: float,
    ) -> list[KeptnContextExtendedCE]:
        """Poll get_events() until it returns at least one event.

        Sleeps retry_sleep seconds after each empty or failed attempt.
        Raises EventsNotFoundError once max_retries attempts are used up.
        """
        for attempt in range(max_retries):
            result = self.get_events(event_filter)
            if result.ok and result.events:
                return result.events
            logger.debug(
                "No matching events (attempt %d/%d): %s",
                attempt + 1, max_retries, result.error or "empty result",
            )
            time.sleep(retry_sleep)
        raise EventsNotFoundError(
            f"could not find matching event after {max_retries} x {retry_sleep}s"
        )

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def _get_events(self, uri: str, number_of_pages: int) -> EventsResult:
        events: list[KeptnContextExtendedCE] = []
        next_page_key = ""

        while True:
            try:
                url = _with_page_key(uri, next_page_key)
            except ValueError as exc:
                return EventsResult.failure(f"invalid events URL {uri!r}: {exc}")

            logger.debug("GET %s", url)
            try:
                resp = self.session.get(
                    url,
                    headers=request_headers(self.config),
                    timeout=self.config.timeout,
                )
                body = resp.content
            except requests.RequestException as exc:
                logger.warning("Events request failed: %s", exc)
                return EventsResult.failure(str(exc))

            if resp.status_code != 200:
                return EventsResult(error=_decode_error(body, resp.status_code))

            try:
                page = Events.from_dict(json.loads(body))
            except ValueError as exc:
                logger.warning("Undecodable events page from %s: %s", url, exc)
                return EventsResult.failure(str(exc))

            events.extend(page.events)

            if page.next_page_key in _LAST_PAGE_KEYS:
                break

            try:
                pages_seen = int(page.next_page_key)
            except ValueError:
                return EventsResult.failure(
                    f"invalid {NEXT_PAGE_KEY_PARAM} in response: {page.next_page_key!r}"
                )

            if number_of_pages > 0 and pages_seen >= number_of_pages:
                logger.debug("Stopping after %d page(s)", number_of_pages)
                break

            next_page_key = page.next_page_key

        return EventsResult(events=events)


def _with_page_key(uri: str, next_page_key: str) -> str:
    """Re-parse uri and set nextPageKey, replacing any existing value.

    Raises ValueError if uri is not an absolute URL.
    """
    parts = urllib.parse.urlsplit(uri)
    if not parts.scheme or not parts.netloc:
        raise ValueError("missing scheme or host")
    _ = parts.port  # raises ValueError on a malformed port
    if not next_page_key:
        return uri
    query = [
        (k, v)
        for k, v in urllib.parse.parse_qsl(parts.query, keep_blank_values=True)
        if k != NEXT_PAGE_KEY_PARAM
    ]
    query.append((NEXT_PAGE_KEY_PARAM, next_page_key))
    query.sort()
    return urllib.parse.urlunsplit(parts._replace(query=urllib.parse.urlencode(query)))


def _decode_error(body: bytes, status_code: int) -> Error:
    """Decode a non-200 body into the server's Error, or a generic one."""
    try:
        error = Error.from_dict(json.loads(body))
    except (ValueError, TypeError) as exc:
        logger.warning("Undecodable error body (HTTP %d): %s", status_code, exc)
        return Error.from_message(str(exc))
    logger.warning("Events request returned HTTP %d: %s", status_code, error)
    return error


def new_event_handler(base_url: str) -> EventHandler:
    """Handler for an unauthenticated datastore reachable at base_url."""
    return EventHandler(HandlerConfig(base_url=normalize_base_url(base_url)))


def new_authenticated_event_handler(
    base_url: str,
    auth_token: str,
    auth_header: str,
    session: requests.Session | None = None,
    scheme: str = DEFAULT_SCHEME,
) -> EventHandler:
    """Handler that authenticates at the API gateway in front of the datastore.

    base_url is the API address; '/mongodb-datastore' is appended when missing.
    """
    return EventHandler(HandlerConfig(
        base_url=normalize_base_url(base_url, datastore_suffix=True),
        auth_token=auth_token,
        auth_header=auth_header,
        scheme=scheme,
        session=session,
    ))
