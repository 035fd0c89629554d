"""Payloads of the deployment task events.

Event types:
    sh.keptn.event.deployment.triggered       -> DeploymentTriggeredEventData
    sh.keptn.event.deployment.started         -> DeploymentStartedEventData
    sh.keptn.event.deployment.status.changed  -> DeploymentStatusChangedEventData
    sh.keptn.event.deployment.finished        -> DeploymentFinishedEventData
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from keptn_events.lib.v0_2_0.events import EventData

DEPLOYMENT_TASK_NAME = "deployment"


@dataclass
class DeploymentData:
    deployment_strategy: str = ""          # e.g. "direct", "blue_green_service"
    deployment_uris_local: list[str] = field(default_factory=list)
    deployment_uris_public: list[str] = field(default_factory=list)
    deployment_names: list[str] = field(default_factory=list)
    git_commit: str = ""                   # version that should be deployed

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> DeploymentData:
        raw = raw or {}
        return cls(
            deployment_strategy=raw.get("deploymentstrategy") or "",
            deployment_uris_local=list(raw.get("deploymentURIsLocal") or []),
            deployment_uris_public=list(raw.get("deploymentURIsPublic") or []),
            deployment_names=list(raw.get("deploymentNames") or []),
            git_commit=raw.get("gitCommit") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.deployment_strategy:
            out["deploymentstrategy"] = self.deployment_strategy
        if self.deployment_uris_local:
            out["deploymentURIsLocal"] = self.deployment_uris_local
        if self.deployment_uris_public:
            out["deploymentURIsPublic"] = self.deployment_uris_public
        out["deploymentNames"] = self.deployment_names
        out["gitCommit"] = self.git_commit
        return out


@dataclass
class DeploymentTriggeredEventData(EventData):
    configuration_change_values: dict[str, Any] = field(default_factory=dict)
    deployment: DeploymentData = field(default_factory=DeploymentData)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> DeploymentTriggeredEventData:
        change = raw.get("configurationChange") or {}
        return cls(
            **cls._event_data_kwargs(raw),
            configuration_change_values=dict(change.get("values") or {}),
            deployment=DeploymentData.from_dict(raw.get("deployment")),
        )

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["configurationChange"] = {"values": self.configuration_change_values}
        out["deployment"] = self.deployment.to_dict()
        return out


@dataclass
class DeploymentStartedEventData(EventData):
    pass


@dataclass
class DeploymentStatusChangedEventData(EventData):
    pass


@dataclass
class DeploymentFinishedEventData(EventData):
    deployment: DeploymentData = field(default_factory=DeploymentData)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> DeploymentFinishedEventData:
        return cls(
            **cls._event_data_kwargs(raw),
            deployment=DeploymentData.from_dict(raw.get("deployment")),
        )

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["deployment"] = self.deployment.to_dict()
        return out
