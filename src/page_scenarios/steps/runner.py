"""Scenario execution: sequential steps, fail-fast, session per scenario."""
from __future__ import annotations

import asyncio
import inspect
import logging
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncContextManager, Callable, Iterable, Optional, Protocol, Sequence

from page_scenarios.config.settings import Settings
from page_scenarios.core.session import PageSession, use_session
from page_scenarios.features.loader import select_scenarios
from page_scenarios.features.models import Feature, Scenario
from page_scenarios.steps.context import ScenarioContext
from page_scenarios.steps.registry import StepRegistry, registry as default_registry
from page_scenarios.steps.results import (
    RunReport,
    ScenarioResult,
    ScenarioStatus,
    StepResult,
    StepStatus,
)

logger = logging.getLogger(__name__)

_SLUG = re.compile(r"[^A-Za-z0-9]+")


class SessionFactory(Protocol):
    def page_session(self) -> AsyncContextManager[PageSession]: ...


async def _call(func: Callable[..., Any], *args: Any) -> Any:
    outcome = func(*args)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return outcome


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


class ScenarioRunner:
    """Runs scenarios against a step registry.

    Within a scenario the first ``AssertionError`` marks it failed and any
    other exception marks it errored; either way the remaining steps are
    reported as skipped without being invoked.
    """

    def __init__(self, registry: Optional[StepRegistry] = None, settings: Optional[Settings] = None) -> None:
        self.registry = registry if registry is not None else default_registry
        self.settings = settings or Settings()

    async def run_phrases(self, phrases: Sequence[str], session: PageSession, *, name: str = "scenario") -> ScenarioResult:
        return await self.run_scenario(Scenario.from_phrases(name, list(phrases)), session)

    async def run_scenario(self, scenario: Scenario, session: PageSession) -> ScenarioResult:
        result = ScenarioResult(scenario=scenario)
        context = ScenarioContext(session, self.settings, name=scenario.name)
        result.started_at = datetime.now(timezone.utc)
        started = time.monotonic()
        logger.info("Scenario started: %s", scenario.name)

        with use_session(session):
            result.status = ScenarioStatus.RUNNING
            try:
                if self.settings.scenario_timeout_s:
                    await asyncio.wait_for(self._execute(scenario, context, result), self.settings.scenario_timeout_s)
                else:
                    await self._execute(scenario, context, result)
            except asyncio.TimeoutError:
                self._abort_on_timeout(scenario, result)
            await self._run_after_hooks(context, result)
            if result.status.is_terminal_failure and self.settings.screenshot_on_failure:
                result.screenshot = await session.screenshot(self._screenshot_path(scenario))

        result.narrative = list(context.narrative)
        result.duration_s = time.monotonic() - started
        log = logger.info if result.status is ScenarioStatus.PASSED else logger.warning
        log("Scenario %s: %s (%.2fs)", result.status.value, scenario.name, result.duration_s)
        return result

    async def run_scenarios(self, scenarios: Iterable[Scenario], browser: SessionFactory) -> RunReport:
        """Run ``scenarios`` concurrently, each in a session of its own."""
        report = RunReport(started_at=datetime.now(timezone.utc))
        started = time.monotonic()
        semaphore = asyncio.Semaphore(self.settings.max_parallel)

        async def _one(scenario: Scenario) -> ScenarioResult:
            async with semaphore:
                try:
                    async with browser.page_session() as session:
                        return await self.run_scenario(scenario, session)
                except Exception as exc:  # noqa: BLE001 - reported as an errored scenario
                    logger.exception("Could not run scenario %s", scenario.name)
                    return self._errored_before_start(scenario, exc)

        report.results = list(await asyncio.gather(*(_one(scenario) for scenario in scenarios)))
        report.duration_s = time.monotonic() - started
        return report

    async def run_features(self, features: Iterable[Feature], browser: SessionFactory) -> RunReport:
        """Run the scenarios of ``features`` selected by ``settings.filter_tags``."""
        return await self.run_scenarios(select_scenarios(features, self.settings.filter_tags), browser)

    async def _execute(self, scenario: Scenario, context: ScenarioContext, result: ScenarioResult) -> None:
        for hook in self.registry.before_hooks:
            try:
                await _call(hook, context)
            except Exception as exc:  # noqa: BLE001 - classified below
                logger.exception("Before-scenario hook failed for %s", scenario.name)
                result.status = ScenarioStatus.ERRORED
                result.error = _describe(exc)
                break

        for step in scenario.steps:
            if result.status.is_terminal_failure:
                result.steps.append(StepResult(step=step, status=StepStatus.SKIPPED))
                continue
            step_started = time.monotonic()
            try:
                match = self.registry.match(step.text)
                logger.debug("Step '%s' matched '%s'", step.text, match.binding.pattern)
                await _call(match.binding.handler, context, *match.arguments)
            except AssertionError as exc:
                result.steps.append(self._problem(step, StepStatus.FAILED, exc, step_started))
                result.status = ScenarioStatus.FAILED
                result.error = _describe(exc)
            except Exception as exc:  # noqa: BLE001 - classified as errored
                logger.debug("Step '%s' raised", step.text, exc_info=True)
                result.steps.append(self._problem(step, StepStatus.ERRORED, exc, step_started))
                result.status = ScenarioStatus.ERRORED
                result.error = _describe(exc)
            else:
                result.steps.append(
                    StepResult(step=step, status=StepStatus.PASSED, duration_s=time.monotonic() - step_started)
                )

        if result.status is ScenarioStatus.RUNNING:
            result.status = ScenarioStatus.PASSED

    async def _run_after_hooks(self, context: ScenarioContext, result: ScenarioResult) -> None:
        for hook in self.registry.after_hooks:
            try:
                await _call(hook, context, result)
            except Exception as exc:  # noqa: BLE001 - hook failures surface on the result
                logger.exception("After-scenario hook failed for %s", result.name)
                if result.status is ScenarioStatus.PASSED:
                    result.status = ScenarioStatus.ERRORED
                    result.error = _describe(exc)

    def _abort_on_timeout(self, scenario: Scenario, result: ScenarioResult) -> None:
        message = f"Scenario timed out after {self.settings.scenario_timeout_s:.1f}s"
        logger.warning("%s: %s", message, scenario.name)
        completed = len(result.steps)
        for index, step in enumerate(scenario.steps[completed:]):
            status = StepStatus.ERRORED if index == 0 else StepStatus.SKIPPED
            result.steps.append(
                StepResult(
                    step=step,
                    status=status,
                    error=message if index == 0 else None,
                    error_type="TimeoutError" if index == 0 else None,
                )
            )
        result.status = ScenarioStatus.ERRORED
        result.error = message

    def _errored_before_start(self, scenario: Scenario, exc: Exception) -> ScenarioResult:
        return ScenarioResult(
            scenario=scenario,
            status=ScenarioStatus.ERRORED,
            steps=[StepResult(step=step, status=StepStatus.SKIPPED) for step in scenario.steps],
            started_at=datetime.now(timezone.utc),
            error=_describe(exc),
        )

    def _screenshot_path(self, scenario: Scenario) -> Path:
        slug = _SLUG.sub("-", scenario.name).strip("-").lower() or "scenario"
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        return self.settings.output_dir / "screenshots" / f"{slug}-{stamp}.png"

    @staticmethod
    def _problem(step, status: StepStatus, exc: Exception, started: float) -> StepResult:
        return StepResult(
            step=step,
            status=status,
            duration_s=time.monotonic() - started,
            error=str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
        )
