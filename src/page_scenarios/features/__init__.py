"""Feature file parsing and scenario selection."""

from .loader import discover_feature_files, load_feature, load_features, parse_feature, select_scenarios
from .models import Feature, Scenario, Step
from .tags import TagExpression

__all__ = [
    "Feature",
    "Scenario",
    "Step",
    "TagExpression",
    "discover_feature_files",
    "load_feature",
    "load_features",
    "parse_feature",
    "select_scenarios",
]
