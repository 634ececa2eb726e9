"""Centralised selectors for the search results page.

Result markup changes often; keep the container locator broad.
"""
from __future__ import annotations

from page_scenarios.core.locators import LocatorSpec, by_css, by_id


class ResultsPageSelectors:
    results_container = by_id("search")
    first_result = by_css("#search .g")

    @staticmethod
    def fields() -> dict[str, LocatorSpec]:
        return {
            "results_container": ResultsPageSelectors.results_container,
            "first_result": ResultsPageSelectors.first_result,
        }
