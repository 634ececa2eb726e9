"""Runtime configuration for scenario runs.

Relies on pydantic-settings so that environment variables (prefixed with ``SCENARIOS_``)
can override defaults.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Iterable, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


def _split_csv(value: object, name: str) -> Tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, (tuple, list)):
        return tuple(str(item).strip() for item in value if str(item).strip())
    if isinstance(value, str):
        parts: Iterable[str] = (part.strip() for part in value.split(","))
        return tuple(part for part in parts if part)
    raise TypeError(f"{name} must be provided as a comma-separated string or list")


class Settings(BaseSettings):
    """Captures runtime configuration for a scenario run."""

    base_url: Optional[str] = Field(
        default=None,
        description="Overrides the default URL of page objects that open at a base URL",
    )
    headless: bool = True
    slow_mo_ms: int = Field(default=0, description="Slow-mo delay in milliseconds")
    viewport_width: int = 1280
    viewport_height: int = 720
    user_agent: Optional[str] = None
    locale: Optional[str] = Field(default="en-US")
    chromium_channel: Optional[str] = Field(
        default=None,
        description="Browser channel passed to Playwright (e.g. 'chrome'); use None for bundled Chromium",
    )
    chromium_args: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=("--disable-blink-features=AutomationControlled",),
        description="Extra Chromium args passed during launch",
    )
    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("build/logs"))

    default_timeout_ms: int = Field(default=15000, description="Playwright default action timeout")
    navigation_timeout_ms: int = Field(default=30000)
    element_timeout_s: float = Field(default=10.0, description="Explicit wait for element resolution")
    poll_interval_s: float = Field(default=0.1, description="Delay between element wait polls")
    scenario_timeout_s: Optional[float] = Field(
        default=300.0, description="Abort a scenario as errored after this many seconds; None disables"
    )

    features_paths: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=("features",), description="Feature files or directories to run"
    )
    filter_tags: str = Field(default="", description="Tag expression selecting scenarios; empty runs all")
    glue_modules: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=("page_scenarios.stepdefs",),
        description="Modules imported to register step definitions",
    )
    max_parallel: int = Field(default=1, description="Scenarios run concurrently, one browser context each")
    output_dir: Path = Field(default=Path("build/test-results"))
    json_report_enabled: bool = True
    screenshot_on_failure: bool = True

    stealth_enabled: bool = Field(default=False, description="Apply playwright-stealth evasions")
    stealth_init_scripts_only: bool = False
    stealth_languages: Optional[Tuple[str, str]] = None
    stealth_platform: Optional[str] = None
    stealth_user_agent: Optional[str] = None

    hyperbrowser_enabled: bool = Field(
        default=False, description="Run scenarios on a remote Hyperbrowser session over CDP"
    )
    hyperbrowser_api_key: Optional[str] = None
    hyperbrowser_use_stealth: bool = True
    hyperbrowser_accept_cookies: bool = True
    hyperbrowser_region: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="SCENARIOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("log_dir", "output_dir", mode="before")
    def _expand_dir(cls, value: str | Path) -> Path:  # noqa: D401
        if isinstance(value, Path):
            return value
        return Path(value).expanduser()

    @field_validator("features_paths", mode="before")
    def _parse_features_paths(cls, value: object) -> Tuple[str, ...]:
        return _split_csv(value, "features_paths")

    @field_validator("glue_modules", mode="before")
    def _parse_glue_modules(cls, value: object) -> Tuple[str, ...]:
        return _split_csv(value, "glue_modules")

    @field_validator("chromium_args", mode="before")
    def _parse_chromium_args(cls, value: object) -> Tuple[str, ...]:
        return _split_csv(value, "chromium_args")

    @field_validator("max_parallel")
    def _validate_parallel(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_parallel must be positive")
        return value

    @field_validator("element_timeout_s", "poll_interval_s")
    def _validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeouts and poll intervals must be positive")
        return value

    @field_validator("scenario_timeout_s", mode="before")
    def _parse_scenario_timeout(cls, value: object) -> Optional[float]:
        if value in (None, "", 0, "0", "none"):
            return None
        return float(value)  # type: ignore[arg-type]

    def ensure_directories(self) -> None:
        """Create directories that must exist at runtime."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def viewport(self) -> dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    def chromium_launch_args(self) -> dict[str, object]:
        launch_args: dict[str, object] = {
            "headless": self.headless,
        }
        if self.slow_mo_ms:
            launch_args["slow_mo"] = self.slow_mo_ms
        if self.chromium_channel:
            launch_args["channel"] = self.chromium_channel
        if self.chromium_args:
            launch_args["args"] = list(self.chromium_args)
        return launch_args

    def context_options(self) -> dict[str, object]:
        options: dict[str, object] = {"viewport": self.viewport()}
        if self.user_agent:
            options["user_agent"] = self.user_agent
        if self.locale:
            options["locale"] = self.locale
        return options

    def stealth_kwargs(self) -> dict[str, object]:
        if not self.stealth_enabled:
            return {}
        kwargs: dict[str, object] = {}
        if self.stealth_languages:
            kwargs["navigator_languages_override"] = self.stealth_languages
        if self.stealth_platform:
            kwargs["navigator_platform_override"] = self.stealth_platform
        if self.stealth_user_agent:
            kwargs["navigator_user_agent_override"] = self.stealth_user_agent
        return kwargs

    def session_options(self) -> dict[str, object]:
        """Keyword arguments for :class:`~page_scenarios.core.session.PageSession`."""
        return {
            "element_timeout_s": self.element_timeout_s,
            "poll_interval_s": self.poll_interval_s,
            "navigation_timeout_ms": self.navigation_timeout_ms,
        }
