"""JSON persistence of run reports."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from page_scenarios.steps.results import RunReport


class JsonReportWriter:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def write(self, report: RunReport, *, filename: str | None = None) -> Path:
        generated_at = datetime.now(timezone.utc)
        name = filename or f"results-{generated_at.strftime('%Y%m%dT%H%M%S')}.json"
        path = self.root / name
        serialisable = {
            "generated_at": generated_at.isoformat().replace("+00:00", "Z"),
            "started_at": report.started_at.isoformat() if report.started_at else None,
            "duration_s": round(report.duration_s, 3),
            "summary": report.summary(),
            "items": [result.to_dict() for result in report.results],
        }
        path.write_text(json.dumps(serialisable, indent=2))
        return path
