"""Search results page."""
from __future__ import annotations

from typing import Optional

from page_scenarios.pages.base import PageObject, text_contains
from page_scenarios.selectors.results_page import ResultsPageSelectors


class SearchResultsPage(PageObject):
    """Two verification strategies are offered.

    ``results_should_contain`` checks the rendered results container while
    ``verify_results_contain`` checks the whole page source, which survives
    container markup changes.
    """

    default_url: Optional[str] = None

    def __init__(self, base_url: Optional[str] = None) -> None:
        super().__init__(base_url, ResultsPageSelectors.fields())

    async def results_should_contain(self, expected_text: str) -> None:
        await self.should_contain_text("results_container", expected_text)

    async def verify_results_contain(self, expected_text: str) -> None:
        if not text_contains(await self.session.page_source(), expected_text):
            url = self.session.url
            raise AssertionError(f"Expected search results at {url} to contain '{expected_text}'")

    async def has_results(self) -> bool:
        return await self.is_displayed("first_result")
