"""Search engine home page."""
from __future__ import annotations

import logging
from typing import Optional

from page_scenarios.pages.base import PageObject
from page_scenarios.selectors.home_page import HomePageSelectors

logger = logging.getLogger(__name__)


class SearchHomePage(PageObject):
    default_url: Optional[str] = HomePageSelectors.default_url

    def __init__(self, base_url: Optional[str] = None) -> None:
        super().__init__(base_url or self.default_url, HomePageSelectors.fields())

    async def enter_search_term(self, search_term: str) -> None:
        await self.enter_text("search_box", search_term)

    async def click_search_button(self) -> None:
        # The button is often hidden behind the suggestion dropdown; submit the box instead.
        await self.wait_for_visible("search_box")
        await self.submit("search_box")
        logger.debug("Submitted search form")
