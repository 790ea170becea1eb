from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Status(IntEnum):
    OK = 0
    ALERT = 2
    UNKNOWN = 3


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Status
    message: str
    region: str
    resource: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": int(self.status),
            "status_label": self.status.name,
            "message": self.message,
            "region": self.region,
            "resource": self.resource,
        }


class CheckRun(BaseModel):
    """Findings produced by one invocation plus the cache entries behind them."""

    findings: list[Finding] = Field(default_factory=list)
    source: dict[str, Any] = Field(default_factory=dict)

    def by_status(self, status: Status) -> list[Finding]:
        return [f for f in self.findings if f.status == status]

    def for_region(self, region: str) -> list[Finding]:
        return [f for f in self.findings if f.region == region]


def add_result(
    results: list[Finding],
    status: Status,
    message: str,
    region: str,
    resource: Optional[str] = None,
) -> Finding:
    finding = Finding(status=status, message=message, region=region, resource=resource)
    results.append(finding)
    return finding
