"""API data-transfer objects for the event datastore.

Field names follow the JSON wire format of the /event endpoint. Unknown keys
in a response are ignored; unset optional fields are dropped from to_dict().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeVar

T = TypeVar("T")


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


@dataclass
class KeptnContextExtendedCE:
    """A single CloudEvent as stored by the datastore.

    `data` is left as the raw decoded JSON; use data_as() to read it as one of
    the typed payloads in keptn_events.lib.
    """

    contenttype: str | None = None
    data: Any = None
    extensions: Any = None
    id: str | None = None
    shkeptncontext: str | None = None
    shkeptnspecversion: str | None = None
    source: str | None = None
    specversion: str | None = None
    time: str | None = None
    triggeredid: str | None = None
    gitcommitid: str | None = None
    type: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> KeptnContextExtendedCE:
        if not isinstance(raw, dict):
            raise ValueError(f"event must be a JSON object, got {type(raw).__name__}")
        return cls(
            contenttype=raw.get("contenttype"),
            data=raw.get("data"),
            extensions=raw.get("extensions"),
            id=raw.get("id"),
            shkeptncontext=raw.get("shkeptncontext"),
            shkeptnspecversion=raw.get("shkeptnspecversion"),
            source=raw.get("source"),
            specversion=raw.get("specversion"),
            time=raw.get("time"),
            triggeredid=raw.get("triggeredid"),
            gitcommitid=raw.get("gitcommitid"),
            type=raw.get("type"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "contenttype": self.contenttype,
            "data": self.data,
            "extensions": self.extensions,
            "id": self.id,
            "shkeptncontext": self.shkeptncontext,
            "shkeptnspecversion": self.shkeptnspecversion,
            "source": self.source,
            "specversion": self.specversion,
            "time": self.time,
            "triggeredid": self.triggeredid,
            "gitcommitid": self.gitcommitid,
            "type": self.type,
        })

    def data_as(self, payload_cls: type[T]) -> T:
        """Decode `data` into a payload type exposing from_dict().

        Raises ValueError if the event carries no object payload.
        """
        if not isinstance(self.data, dict):
            raise ValueError(f"event {self.id!r} has no object payload")
        return payload_cls.from_dict(self.data)  # type: ignore[attr-defined]


@dataclass
class Events:
    """One page of the /event response (the pagination envelope)."""

    events: list[KeptnContextExtendedCE] = field(default_factory=list)
    next_page_key: str = ""
    page_size: int | None = None
    total_count: int | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> Events:
        """Parse a decoded response body.

        Raises ValueError when the body is not an object or `events` is not a
        list. A null `events` is treated as an empty page.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"events response must be a JSON object, got {type(raw).__name__}")
        items = raw.get("events")
        if items is None:
            items = []
        if not isinstance(items, list):
            raise ValueError("events response field 'events' must be a list")
        next_page_key = raw.get("nextPageKey")
        return cls(
            events=[KeptnContextExtendedCE.from_dict(e) for e in items],
            next_page_key="" if next_page_key is None else str(next_page_key),
            page_size=raw.get("pageSize"),
            total_count=raw.get("totalCount"),
        )


@dataclass
class Error:
    """Structured error value returned by the API, or built locally for
    transport and decode failures."""

    message: str = ""
    code: int | None = None
    fields: str | None = None

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.code}: {self.message}"
        return self.message

    @classmethod
    def from_message(cls, message: str) -> Error:
        return cls(message=message)

    @classmethod
    def from_dict(cls, raw: Any) -> Error:
        if not isinstance(raw, dict):
            raise ValueError(f"error response must be a JSON object, got {type(raw).__name__}")
        code = raw.get("code")
        message = raw.get("message")
        return cls(
            message="" if message is None else str(message),
            code=int(code) if code is not None else None,
            fields=raw.get("fields"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"code": self.code, "message": self.message, "fields": self.fields})
