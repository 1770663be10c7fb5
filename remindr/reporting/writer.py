"""Daily report persistence."""

import json
import logging
import os
from pathlib import Path
from typing import Union

from ..models.report import DailyReport

logger = logging.getLogger(__name__)


class ReportWriter:
    """Writes daily_report_YYYY-MM-DD.txt (and optionally .json) files."""

    def __init__(self, report_dir: Union[str, Path] = ".", write_json: bool = False):
        self.report_dir = Path(report_dir)
        self.write_json = write_json

    def report_path(self, report: DailyReport) -> Path:
        return self.report_dir / f"daily_report_{report.report_date.isoformat()}.txt"

    def write(self, report: DailyReport) -> Path:
        """Write the report, replacing any earlier checkpoint for the same day."""
        self.report_dir.mkdir(parents=True, exist_ok=True)
        path = self.report_path(report)
        self._replace(path, report.to_human_readable())

        if self.write_json:
            json_path = path.with_suffix('.json')
            self._replace(json_path, json.dumps(report.to_dict(), indent=2, default=str))

        logger.debug("Report written to %s (partial=%s)", path, report.partial)
        return path

    def _replace(self, path: Path, content: str) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(content)
        os.replace(tmp_path, path)
