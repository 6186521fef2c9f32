"""Engine types (plan, changes, outcomes)."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class Action(str, Enum):
    PROVISION = "provision"
    NOOP = "no-op"
    SKIP = "skip"
    UNSUPPORTED = "unsupported"


class Status(str, Enum):
    PROVISIONED = "provisioned"
    SKIPPED = "skipped"
    FAILED = "failed"


class PlanMetadata(BaseModel):
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    platform: str
    engine_version: str


class ResourceChange(BaseModel):
    address: str
    resource_type: str
    category: str
    action: Action
    reason: str | None = None
    desired: dict[str, Any] | None = None


class Plan(BaseModel):
    metadata: PlanMetadata
    changes: list[ResourceChange]

    def summary(self) -> dict[str, int]:
        counts = {a.value: 0 for a in Action}
        for c in self.changes:
            counts[c.action.value] += 1
        return counts

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> Plan:
        path = Path(path)
        return cls.model_validate_json(path.read_text(encoding="utf-8"))


class Outcome(BaseModel):
    address: str
    resource_type: str
    status: Status
    message: str | None = None


class ApplyResult(BaseModel):
    outcomes: list[Outcome] = Field(default_factory=list)

    def summary(self) -> dict[str, int]:
        counts = {s.value: 0 for s in Status}
        for o in self.outcomes:
            counts[o.status.value] += 1
        return counts

    @property
    def failed(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status == Status.FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed
