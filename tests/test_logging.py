from __future__ import annotations

import logging

from page_scenarios.core.logging import scenario_logger
from page_scenarios.steps.context import ScenarioContext


def test_scenario_logger_prefixes_scenario_name(caplog):
    caplog.set_level(logging.INFO, logger="page_scenarios")

    scenario_logger("page_scenarios.test", "Searching for cats").info("step %s done", 2)

    assert caplog.records[-1].getMessage() == "[Searching for cats] step 2 done"


def test_context_record_logs_and_keeps_narrative(caplog, session, settings):
    caplog.set_level(logging.INFO, logger="page_scenarios")
    context = ScenarioContext(session, settings, name="search cats")

    context.record("Open search homepage")

    assert context.narrative == ["Open search homepage"]
    assert "[search cats] Open search homepage" in caplog.messages
