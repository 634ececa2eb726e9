"""Logging helpers."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping

_QUIET_LOGGERS = ("asyncio", "hyperbrowser")


class ScenarioLogAdapter(logging.LoggerAdapter):
    """Prefixes records with the scenario name so parallel runs stay readable."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['scenario']}] {msg}", kwargs


def scenario_logger(name: str, scenario: str) -> ScenarioLogAdapter:
    return ScenarioLogAdapter(logging.getLogger(name), {"scenario": scenario or "scenario"})


def configure_logging(level: str, log_dir: Path, *, filename: str = "scenarios.log") -> Path:
    """Configure console + file logging for CLI runs and return the log file path."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / filename

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file),
        ],
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return log_file
