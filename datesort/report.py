"""
Preview tables, CSV export and run logs.
"""

import csv
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .constants import (CSV_FIELDS, CSV_SUFFIX, DATE_DISPLAY_FORMAT, LOG_SUFFIX, PROGRAM,
                        STAMP_FORMAT)
from .core import FileRecord
from .file_operations import MoveResult
from .stats import StatsManager
from .timestamps import Provenance


PROVENANCE_STYLES = {
    Provenance.DATE_TAKEN: "green",
    Provenance.MEDIA_CREATED: "cyan",
    Provenance.DATE_MODIFIED: "yellow",
    Provenance.NONE_FOUND: "magenta",
    Provenance.ERROR: "red",
}

LOG_FORMAT = "[%(asctime)s][%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_date(date: Optional[datetime]) -> str:
    return date.strftime(DATE_DISPLAY_FORMAT) if date else ""


def record_row(record: FileRecord) -> List[str]:
    """Return the CSV row for a record, in CSV_FIELDS order."""
    return [
        str(record.source_path),
        record.provenance.value,
        format_date(record.resolved_date),
        str(record.destination_path) if record.destination_path else "",
    ]


def render_preview(records: Sequence[FileRecord], console: Console) -> None:
    """Print the plan as a table with rows colored by provenance."""
    table = Table(title="Sort Preview")
    table.add_column("File")
    table.add_column("Date Type")
    table.add_column("Date")
    table.add_column("Destination")

    for record in records:
        destination = str(record.destination_path) if record.destination_path else "-"
        if record.provenance is Provenance.ERROR and record.error:
            destination = record.error
        table.add_row(record.name, record.provenance.value, format_date(record.resolved_date),
                      destination, style=PROVENANCE_STYLES[record.provenance])

    console.print(table)


def write_csv(records: Iterable[FileRecord], path: Path) -> Path:
    """Write every record to ``path`` with the FileName/DateType/Date/Destination columns."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_FIELDS)
        for record in records:
            writer.writerow(record_row(record))
    return path


def print_summary(stats: StatsManager, console: Console) -> None:
    """Print processing summary."""
    table = Table(title="Processing Summary")
    table.add_column("Category", style="cyan")
    table.add_column("Count", style="green")

    for provenance in Provenance:
        table.add_row(provenance.value, str(stats.get_count(provenance)))
    table.add_row("Moved", str(stats.get_moved()))
    table.add_row("Move Failures", str(stats.get_failed()))
    if stats.get_dry_run():
        table.add_row("Dry Run (not moved)", str(stats.get_dry_run()))

    console.print(table)


def print_move_failures(results: Iterable[MoveResult], console: Console) -> None:
    for result in results:
        if result.failed:
            console.print(f"[red]Could not move {result.record.name}: {result.error}[/red]")


@dataclass
class ReportSettings:
    """Where run artifacts go and which clock names them."""
    logs_dir: Path = field(default_factory=lambda: Path.home() / f".{PROGRAM}" / "logs")
    clock: Callable[[], datetime] = datetime.now
    write_log: bool = True


class ResultsReporter:
    """Names and writes the CSV results file and the run log of one invocation."""

    def __init__(self, settings: Optional[ReportSettings] = None):
        self.settings = settings or ReportSettings()
        # One stamp per run so the CSV and log file names line up
        self.stamp = self.settings.clock().strftime(STAMP_FORMAT)
        self.log_handler: Optional[logging.Handler] = None

    @property
    def csv_path(self) -> Path:
        return self.settings.logs_dir / f"{self.stamp}{CSV_SUFFIX}"

    @property
    def log_path(self) -> Path:
        return self.settings.logs_dir / f"{self.stamp}{LOG_SUFFIX}"

    def setup_run_logger(self, logger: logging.Logger) -> Optional[Path]:
        """Attach a file handler writing timestamped, leveled lines to the run log."""
        if not self.settings.write_log:
            return None

        self.settings.logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(self.log_path, encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(file_handler)

        # Ensure logger level allows INFO messages to reach the file handler
        if logger.getEffectiveLevel() > logging.INFO:
            logger.setLevel(logging.INFO)

        self.log_handler = file_handler
        return self.log_path

    def close_run_logger(self, logger: logging.Logger) -> None:
        if self.log_handler is not None:
            logger.removeHandler(self.log_handler)
            self.log_handler.close()
            self.log_handler = None

    def export(self, records: Sequence[FileRecord]) -> Path:
        """Write the results CSV for this run and return its path."""
        return write_csv(records, self.csv_path)
