"""Relay data models: inbound notifications and trigger outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class WebhookNotification:
    event_type: str
    headers: dict[str, str] = field(default_factory=dict)
    payload: Any = field(default_factory=dict)


class FailureKind(str, Enum):
    MISCONFIGURED = "misconfigured"
    UPSTREAM_REJECTED = "upstream_rejected"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    REQUEST_CONSTRUCTION_FAILED = "request_construction_failed"
    NO_DEPLOYMENT = "no_deployment"


@dataclass
class Diagnostic:
    """Failure detail kept for logs; never sent back to the webhook caller."""

    kind: FailureKind
    status: int | None = None
    body: str = ""
    error: str = ""
    missing: list[str] = field(default_factory=list)

    def as_log_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"kind": self.kind.value}
        if self.status is not None:
            fields["upstream_status"] = self.status
        if self.body:
            fields["upstream_body"] = self.body
        if self.error:
            fields["error"] = self.error
        if self.missing:
            fields["missing"] = self.missing
        return fields


MESSAGE_IGNORED = "ignored"
MESSAGE_TRIGGERED = "triggered"
MESSAGE_MISCONFIGURED = "misconfigured"
MESSAGE_FAILED = "trigger failed"
MESSAGE_NO_DEPLOYMENT = "no deployment id found"


@dataclass
class DeployOutcome:
    succeeded: bool
    status_code: int | None
    message: str
    diagnostic: Diagnostic | None = None

    @classmethod
    def ignored(cls) -> DeployOutcome:
        return cls(succeeded=True, status_code=200, message=MESSAGE_IGNORED)

    @classmethod
    def triggered(cls) -> DeployOutcome:
        return cls(succeeded=True, status_code=200, message=MESSAGE_TRIGGERED)

    @classmethod
    def misconfigured(cls, missing: list[str]) -> DeployOutcome:
        return cls(
            succeeded=False,
            status_code=500,
            message=MESSAGE_MISCONFIGURED,
            diagnostic=Diagnostic(kind=FailureKind.MISCONFIGURED, missing=missing),
        )

    @classmethod
    def failed(cls, diagnostic: Diagnostic, message: str = MESSAGE_FAILED) -> DeployOutcome:
        return cls(succeeded=False, status_code=500, message=message, diagnostic=diagnostic)
