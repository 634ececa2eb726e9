"""User-level step libraries composed from page objects."""

from .narration import narrated
from .search import SearchJourney

__all__ = ["SearchJourney", "narrated"]
