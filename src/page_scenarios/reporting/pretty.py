"""Human-readable run summary in the spirit of Cucumber's ``pretty`` plugin."""
from __future__ import annotations

from page_scenarios.steps.results import RunReport, ScenarioResult, StepStatus

_MARKS = {
    StepStatus.PASSED: "+",
    StepStatus.FAILED: "x",
    StepStatus.ERRORED: "!",
    StepStatus.SKIPPED: "-",
}


def format_scenario(result: ScenarioResult) -> list[str]:
    lines = [f"Scenario: {result.name}  [{result.status.value.upper()}]  ({result.scenario.location})"]
    for step_result in result.steps:
        lines.append(f"  {_MARKS[step_result.status]} {step_result.step}")
        if step_result.error:
            lines.append(f"      {step_result.error_type}: {step_result.error}")
    if result.error and not result.first_problem():
        lines.append(f"  ! {result.error}")
    if result.screenshot:
        lines.append(f"  screenshot: {result.screenshot}")
    return lines


def format_pretty(report: RunReport) -> str:
    lines: list[str] = []
    for result in report.results:
        lines.extend(format_scenario(result))
        lines.append("")
    summary = report.summary()
    steps = [step for result in report.results for step in result.steps]
    step_counts = ", ".join(
        f"{sum(1 for step in steps if step.status is status)} {status.value}" for status in StepStatus
    )
    lines.append(
        f"{summary['scenarios']} scenarios ({summary['passed']} passed, {summary['failed']} failed, "
        f"{summary['errored']} errored)"
    )
    lines.append(f"{len(steps)} steps ({step_counts})")
    lines.append(f"Finished in {report.duration_s:.2f}s")
    return "\n".join(lines)
