"""Entry point for scenario runs."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from page_scenarios.config.run_config import RunConfig
from page_scenarios.config.settings import Settings
from page_scenarios.core.browser import BrowserSession
from page_scenarios.core.logging import configure_logging
from page_scenarios.features import TagExpression, load_features, select_scenarios
from page_scenarios.reporting import JsonReportWriter, format_pretty
from page_scenarios.steps import RunReport, ScenarioRunner, registry
from page_scenarios.steps.registry import load_glue

logger = logging.getLogger("page_scenarios.cli")


async def run(settings: Settings) -> RunReport:
    load_glue(settings.glue_modules)
    features = load_features(settings.features_paths)
    scenarios = select_scenarios(features, TagExpression(settings.filter_tags))
    if not scenarios:
        logger.warning("No scenarios matched tag filter '%s'", settings.filter_tags)
        return RunReport()
    logger.info(
        "Running %s scenario(s) with %s step definitions (max parallel %s)",
        len(scenarios),
        len(registry),
        settings.max_parallel,
    )
    runner = ScenarioRunner(registry, settings)
    async with BrowserSession(settings) as browser:
        return await runner.run_scenarios(scenarios, browser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run page-object scenarios against a live browser")
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Feature files or directories (defaults to settings.features_paths)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=(
            "Path to a TOML run configuration file "
            "(defaults to config/run_config.toml when present)"
        ),
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        help="Ignore config/run_config.toml even if it exists",
    )
    parser.add_argument("--tags", default=None, help="Tag expression, e.g. '@smoke and not @wip'")
    parser.add_argument("--parallel", type=int, default=None, help="Maximum concurrent scenarios")
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--headed",
        action="store_true",
        help="Force headed browser mode (overrides config/env)",
    )
    mode_group.add_argument(
        "--headless",
        action="store_true",
        help="Force headless browser mode (overrides config/env)",
    )
    parser.add_argument(
        "--override",
        action="append",
        metavar="KEY=VALUE",
        help="Override a Settings attribute (repeatable). Values accept JSON literals.",
    )
    return parser


def _decode_override(value: str) -> object:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        pass
    lower = value.strip().lower()
    if lower in {"true", "false"}:
        return lower == "true"
    return value


def _apply_overrides(settings: Settings, overrides: dict[str, object]) -> None:
    for key, raw in overrides.items():
        if key not in Settings.model_fields:
            logger.warning("Ignoring unknown override '%s'", key)
            continue
        setattr(settings, key, raw)
        logger.info("Override: set %s=%r", key, raw)


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    settings = Settings()
    config_path: Optional[Path] = None
    run_config: Optional[RunConfig] = None
    overrides: dict[str, object] = {}

    if not args.no_config:
        if args.config:
            config_path = args.config
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            default_path = Path("config/run_config.toml")
            if default_path.exists():
                config_path = default_path

    if config_path:
        run_config = RunConfig.load(config_path)
        run_config.apply_to(settings, base_dir=config_path.parent)

    if args.override:
        for entry in args.override:
            if "=" not in entry:
                parser.error(f"Override must be in KEY=VALUE form (got '{entry}')")
            key, value = entry.split("=", 1)
            overrides[key.strip()] = _decode_override(value.strip())

    if args.paths:
        settings.features_paths = tuple(str(path) for path in args.paths)
    if args.tags is not None:
        settings.filter_tags = args.tags
    if args.parallel is not None:
        settings.max_parallel = args.parallel
    if args.headed:
        settings.headless = False
    elif args.headless:
        settings.headless = True

    if overrides:
        _apply_overrides(settings, overrides)

    log_file = configure_logging(settings.log_level, settings.log_dir)
    logger.info("Logging to %s", log_file)
    settings.ensure_directories()

    if run_config:
        suffix = f" ({run_config.title})" if run_config.title else ""
        logger.info("Loaded run profile '%s'%s from %s", run_config.profile, suffix, config_path)
        if run_config.notes:
            logger.info("Profile notes: %s", run_config.notes)
    elif config_path is None:
        logger.info("Running with environment-based settings (no run_config applied)")

    report = asyncio.run(run(settings))
    print(format_pretty(report))
    if settings.json_report_enabled and report.results:
        path = JsonReportWriter(settings.output_dir).write(report)
        logger.info("Wrote JSON report to %s", path)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
