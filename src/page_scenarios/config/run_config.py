"""User-friendly run profile loader for manual runs."""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Iterable, Optional, TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:  # pragma: no cover
    from page_scenarios.config.settings import Settings


def _coerce_string_list(value: object) -> list[str]:
    if value in (None, "", ()):
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Iterable):
        result: list[str] = []
        for item in value:
            text = str(item).strip()
            if text:
                result.append(text)
        return result
    raise TypeError("Expected string or list of strings")


class ScenariosSection(BaseModel):
    """Which scenarios to run and where their steps live."""

    features: list[str] = Field(default_factory=list)
    tags: Optional[str] = Field(default=None, description="Tag expression, e.g. '@smoke and not @wip'")
    glue: list[str] = Field(default_factory=list)
    max_parallel: Optional[int] = Field(default=None, ge=1)

    @field_validator("features", "glue", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> list[str]:
        return _coerce_string_list(value)


class BrowserSection(BaseModel):
    """Browser/runtime overrides decoded from the run config."""

    base_url: Optional[str] = None
    headless: Optional[bool] = None
    slow_mo_ms: Optional[int] = Field(default=None, ge=0)
    viewport_width: Optional[int] = Field(default=None, ge=0)
    viewport_height: Optional[int] = Field(default=None, ge=0)
    stealth: Optional[bool] = None
    log_level: Optional[str] = None

    @field_validator("base_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TimeoutsSection(BaseModel):
    element_s: Optional[float] = Field(default=None, gt=0)
    poll_interval_s: Optional[float] = Field(default=None, gt=0)
    navigation_ms: Optional[int] = Field(default=None, ge=0)
    scenario_s: Optional[float] = Field(default=None, ge=0, description="0 disables the scenario timeout")


class ReportSection(BaseModel):
    output_dir: Optional[str] = None
    write_json: Optional[bool] = Field(default=None, alias="json")
    screenshots: Optional[bool] = None


class RunConfig(BaseModel):
    """Top-level configuration decoded from TOML."""

    profile: str = Field(default="default", description="Human label used for logging")
    title: Optional[str] = None
    notes: Optional[str] = None
    scenarios: ScenariosSection = Field(default_factory=ScenariosSection)
    browser: BrowserSection = Field(default_factory=BrowserSection)
    timeouts: TimeoutsSection = Field(default_factory=TimeoutsSection)
    report: ReportSection = Field(default_factory=ReportSection)

    @classmethod
    def load(cls, path: Path) -> "RunConfig":
        """Load a config from a TOML file."""
        data = tomllib.loads(path.read_text())
        return cls.model_validate(data)

    # Public API -----------------------------------------------------------------

    def apply_to(self, settings: "Settings", *, base_dir: Optional[Path] = None) -> None:
        """Apply overrides to an existing Settings instance."""
        self._apply_scenarios(settings, base_dir)
        self._apply_browser(settings)
        self._apply_timeouts(settings)
        self._apply_report(settings, base_dir)

    # Internal helpers -----------------------------------------------------------

    def _apply_scenarios(self, settings: "Settings", base_dir: Optional[Path]) -> None:
        scenarios = self.scenarios
        if scenarios.features:
            settings.features_paths = tuple(str(_resolve_path(raw, base_dir)) for raw in scenarios.features)
        if scenarios.tags is not None:
            settings.filter_tags = scenarios.tags
        if scenarios.glue:
            settings.glue_modules = tuple(scenarios.glue)
        if scenarios.max_parallel is not None:
            settings.max_parallel = scenarios.max_parallel

    def _apply_browser(self, settings: "Settings") -> None:
        browser = self.browser
        if browser.base_url is not None:
            settings.base_url = browser.base_url
        if browser.headless is not None:
            settings.headless = browser.headless
        if browser.slow_mo_ms is not None:
            settings.slow_mo_ms = browser.slow_mo_ms
        if browser.viewport_width is not None:
            settings.viewport_width = browser.viewport_width
        if browser.viewport_height is not None:
            settings.viewport_height = browser.viewport_height
        if browser.stealth is not None:
            settings.stealth_enabled = browser.stealth
        if browser.log_level:
            settings.log_level = browser.log_level

    def _apply_timeouts(self, settings: "Settings") -> None:
        timeouts = self.timeouts
        if timeouts.element_s is not None:
            settings.element_timeout_s = timeouts.element_s
        if timeouts.poll_interval_s is not None:
            settings.poll_interval_s = timeouts.poll_interval_s
        if timeouts.navigation_ms is not None:
            settings.navigation_timeout_ms = timeouts.navigation_ms
        if timeouts.scenario_s is not None:
            settings.scenario_timeout_s = timeouts.scenario_s or None

    def _apply_report(self, settings: "Settings", base_dir: Optional[Path]) -> None:
        report = self.report
        if report.output_dir:
            settings.output_dir = _resolve_path(report.output_dir, base_dir)
        if report.write_json is not None:
            settings.json_report_enabled = report.write_json
        if report.screenshots is not None:
            settings.screenshot_on_failure = report.screenshots


def _resolve_path(raw: str, base_dir: Optional[Path]) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute() and base_dir:
        return (base_dir / path).resolve()
    return path


__all__ = ["RunConfig"]
