"""Locator declarations for the search engine pages."""

from .home_page import HomePageSelectors
from .results_page import ResultsPageSelectors

__all__ = [
    "HomePageSelectors",
    "ResultsPageSelectors",
]
