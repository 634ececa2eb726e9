"""Step bindings, scenario context and the scenario runner."""

from .context import ScenarioContext
from .registry import (
    StepBinding,
    StepMatch,
    StepRegistry,
    after_scenario,
    before_scenario,
    given,
    registry,
    step,
    then,
    when,
)
from .results import RunReport, ScenarioResult, ScenarioStatus, StepResult, StepStatus
from .runner import ScenarioRunner

__all__ = [
    "RunReport",
    "ScenarioContext",
    "ScenarioResult",
    "ScenarioRunner",
    "ScenarioStatus",
    "StepBinding",
    "StepMatch",
    "StepRegistry",
    "StepResult",
    "StepStatus",
    "after_scenario",
    "before_scenario",
    "given",
    "registry",
    "step",
    "then",
    "when",
]
