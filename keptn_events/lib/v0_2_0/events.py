"""Common payload fields shared by every task event (Keptn event format 0.2.0)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

KEPTN_EVENT_PREFIX = "sh.keptn.event"

STATUS_SUCCEEDED = "succeeded"
STATUS_ERRORED = "errored"
STATUS_UNKNOWN = "unknown"

RESULT_PASS = "pass"
RESULT_WARNING = "warning"
RESULT_FAILED = "fail"


def get_triggered_event_type(task: str) -> str:
    return f"{KEPTN_EVENT_PREFIX}.{task}.triggered"


def get_started_event_type(task: str) -> str:
    return f"{KEPTN_EVENT_PREFIX}.{task}.started"


def get_status_changed_event_type(task: str) -> str:
    return f"{KEPTN_EVENT_PREFIX}.{task}.status.changed"


def get_finished_event_type(task: str) -> str:
    return f"{KEPTN_EVENT_PREFIX}.{task}.finished"


@dataclass
class EventData:
    project: str = ""
    stage: str = ""
    service: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    status: str = ""
    result: str = ""
    message: str = ""

    @classmethod
    def _event_data_kwargs(cls, raw: dict[str, Any]) -> dict[str, Any]:
        return {
            "project": raw.get("project") or "",
            "stage": raw.get("stage") or "",
            "service": raw.get("service") or "",
            "labels": dict(raw.get("labels") or {}),
            "status": raw.get("status") or "",
            "result": raw.get("result") or "",
            "message": raw.get("message") or "",
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]):
        return cls(**cls._event_data_kwargs(raw))

    def to_dict(self) -> dict[str, Any]:
        # Empty fields are omitted on the wire.
        out: dict[str, Any] = {
            "project": self.project,
            "stage": self.stage,
            "service": self.service,
            "labels": self.labels,
            "status": self.status,
            "result": self.result,
            "message": self.message,
        }
        return {k: v for k, v in out.items() if v}
