"""Search journeys built from the home and results page objects."""
from __future__ import annotations

from page_scenarios.journeys.narration import narrated
from page_scenarios.pages.home_page import SearchHomePage
from page_scenarios.pages.results_page import SearchResultsPage
from page_scenarios.steps.context import ScenarioContext


class SearchJourney:
    def __init__(self, context: ScenarioContext) -> None:
        self.context = context

    @property
    def home_page(self) -> SearchHomePage:
        return self.context.page(SearchHomePage)

    @property
    def results_page(self) -> SearchResultsPage:
        return self.context.page(SearchResultsPage)

    @narrated("Open search homepage")
    async def open_homepage(self) -> None:
        await self.home_page.open()

    @narrated("Search for '{0}'")
    async def search_for(self, search_term: str) -> None:
        await self.home_page.enter_search_term(search_term)
        await self.home_page.click_search_button()

    @narrated("Verify search results contain '{0}'")
    async def verify_search_results(self, expected_text: str) -> None:
        await self.results_page.verify_results_contain(expected_text)

    @narrated("Verify results container shows '{0}'")
    async def verify_results_container(self, expected_text: str) -> None:
        await self.results_page.results_should_contain(expected_text)

    @narrated("Verify at least one result is displayed")
    async def verify_has_results(self) -> None:
        if not await self.results_page.has_results():
            raise AssertionError("Expected at least one search result to be displayed")
