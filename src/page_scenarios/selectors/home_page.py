"""Selectors for the search engine home page."""
from __future__ import annotations

from dataclasses import dataclass

from page_scenarios.core.locators import LocatorSpec, by_css, by_name


@dataclass(frozen=True)
class HomePageSelectors:
    default_url = "https://www.google.com"
    search_box = by_name("q")
    search_button = by_name("btnK")
    google_search_button = by_css("input[value='Google Search']")

    @staticmethod
    def fields() -> dict[str, LocatorSpec]:
        return {
            "search_box": HomePageSelectors.search_box,
            "search_button": HomePageSelectors.search_button,
            "google_search_button": HomePageSelectors.google_search_button,
        }
