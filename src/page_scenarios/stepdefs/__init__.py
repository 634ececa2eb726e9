"""Step definitions registered on the default registry when imported."""

from page_scenarios.steps.registry import registry

from .search_steps import register_search_steps

register_search_steps(registry)

__all__ = ["register_search_steps"]
