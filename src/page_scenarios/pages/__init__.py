"""Page objects for the search engine under test."""

from .base import PageObject, text_contains
from .home_page import SearchHomePage
from .results_page import SearchResultsPage

__all__ = [
    "PageObject",
    "SearchHomePage",
    "SearchResultsPage",
    "text_contains",
]
