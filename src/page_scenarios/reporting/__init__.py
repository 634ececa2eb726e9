"""Console and JSON reporters for scenario runs."""

from .json_report import JsonReportWriter
from .pretty import format_pretty

__all__ = ["JsonReportWriter", "format_pretty"]
