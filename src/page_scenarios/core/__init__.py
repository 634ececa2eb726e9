"""Browser session, locator and logging primitives."""

from .locators import LocatorSpec, ResolvedElement, Strategy, by_css, by_id, by_name, by_xpath, resolve_all, resolve_one
from .session import PageSession, current_session, use_session

__all__ = [
    "LocatorSpec",
    "PageSession",
    "ResolvedElement",
    "Strategy",
    "by_css",
    "by_id",
    "by_name",
    "by_xpath",
    "current_session",
    "resolve_all",
    "resolve_one",
    "use_session",
]
