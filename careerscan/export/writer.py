"""CSV export of the jobs collected by a run."""

import csv
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Union

from careerscan.domain.models import ExportArtifact, JobRecord
from careerscan.logging import get_logger
from careerscan.utils.timestamps import format_timestamp, utc_today

logger = get_logger(__name__, component="export")

EXPORT_COLUMNS = ("Job Title", "Company", "Job Link", "Source", "Scraped At")


class ExportError(OSError):
    """The export file could not be written."""


class ExportWriter:
    """Writes one ``<prefix>-<YYYY-MM-DD>.csv`` file per run date.

    A second run on the same date replaces the file. Files are never
    deleted by the service.
    """

    def __init__(self, directory: Union[str, Path] = "output", filename_prefix: str = "jobs") -> None:
        self.directory = Path(directory)
        self.filename_prefix = filename_prefix

    def filename_for(self, run_date: date) -> str:
        return f"{self.filename_prefix}-{run_date.isoformat()}.csv"

    def write(self, records: Iterable[JobRecord], run_date: Optional[date] = None) -> ExportArtifact:
        """
        Write ``records`` to the export file for ``run_date`` (default: today, UTC).

        Returns:
            ExportArtifact describing the written file

        Raises:
            ExportError: If the directory or file cannot be written
        """
        run_date = run_date or utc_today()
        path = self.directory / self.filename_for(run_date)
        rows = [
            (
                record.title,
                record.company,
                record.link,
                record.source,
                format_timestamp(record.scraped_at, include_milliseconds=True),
            )
            for record in records
        ]

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write to a temp file in the same directory, then swap it in
            temp_fd, temp_path = tempfile.mkstemp(
                suffix=".csv", prefix=f".{self.filename_prefix}-", dir=self.directory, text=True
            )
        except OSError as e:
            raise ExportError(f"Cannot write to export directory {self.directory}: {e}") from e

        try:
            with os.fdopen(temp_fd, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(EXPORT_COLUMNS)
                writer.writerows(rows)
            os.replace(temp_path, path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise ExportError(f"Failed to write export {path}: {e}") from e

        logger.info(
            f"Exported {len(rows)} jobs to {path}",
            extra={"event": "export.written", "path": str(path), "row_count": len(rows)},
        )
        return ExportArtifact(path=path, row_count=len(rows))
