"""Outcome records for steps, scenarios and whole runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from page_scenarios.features.models import Scenario, Step


class StepStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERRORED = "errored"


class ScenarioStatus(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"

    @property
    def is_terminal_failure(self) -> bool:
        return self in (ScenarioStatus.FAILED, ScenarioStatus.ERRORED)


@dataclass(slots=True)
class StepResult:
    step: Step
    status: StepStatus
    duration_s: float = 0.0
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "keyword": self.step.keyword,
            "text": self.step.text,
            "line": self.step.line,
            "status": self.status.value,
            "duration_s": round(self.duration_s, 3),
            "error": self.error,
            "error_type": self.error_type,
        }


@dataclass(slots=True)
class ScenarioResult:
    scenario: Scenario
    status: ScenarioStatus = ScenarioStatus.NOT_STARTED
    steps: list[StepResult] = field(default_factory=list)
    started_at: Optional[datetime] = None
    duration_s: float = 0.0
    error: Optional[str] = None
    narrative: list[str] = field(default_factory=list)
    screenshot: Optional[Path] = None

    @property
    def name(self) -> str:
        return self.scenario.name

    def count(self, status: StepStatus) -> int:
        return sum(1 for result in self.steps if result.status is status)

    def first_problem(self) -> Optional[StepResult]:
        return next(
            (result for result in self.steps if result.status in (StepStatus.FAILED, StepStatus.ERRORED)),
            None,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.scenario.name,
            "feature": self.scenario.feature,
            "location": self.scenario.location,
            "tags": sorted(self.scenario.tags),
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "duration_s": round(self.duration_s, 3),
            "error": self.error,
            "narrative": list(self.narrative),
            "screenshot": str(self.screenshot) if self.screenshot else None,
            "steps": [result.to_dict() for result in self.steps],
        }


@dataclass(slots=True)
class RunReport:
    results: list[ScenarioResult] = field(default_factory=list)
    started_at: Optional[datetime] = None
    duration_s: float = 0.0

    def count(self, status: ScenarioStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def ok(self) -> bool:
        return all(result.status is ScenarioStatus.PASSED for result in self.results)

    def summary(self) -> dict[str, int]:
        return {
            "scenarios": len(self.results),
            "passed": self.count(ScenarioStatus.PASSED),
            "failed": self.count(ScenarioStatus.FAILED),
            "errored": self.count(ScenarioStatus.ERRORED),
        }
