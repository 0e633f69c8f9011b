"""
Moving classified files into their year/month folders.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .constants import get_logger
from .core import FileRecord
from .errors import DestinationExistsError, MoveError


@dataclass(frozen=True)
class MoveResult:
    """Outcome of moving one record; the record itself is never changed."""
    record: FileRecord
    performed: bool
    error: Optional[str] = None
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        return self.error is not None


class FileOperations:
    """Performs record moves with directory creation and dry-run support."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.logger = get_logger()

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if needed."""
        directory.mkdir(parents=True, exist_ok=True)

    def move_file_safely(self, source: Path, dest: Path) -> None:
        """Move ``source`` to ``dest`` without ever replacing an existing file."""
        if dest.exists():
            raise DestinationExistsError(dest)

        self.ensure_directory(dest.parent)
        shutil.move(str(source), str(dest))

        # Verify the operation
        if not dest.exists():
            raise MoveError(f"File not found after move: {dest}")
        if source.exists():
            raise MoveError(f"Source file still exists after move: {source}")

    def move_record(self, record: FileRecord) -> MoveResult:
        """Move one record to its destination, reporting instead of raising."""
        if record.destination_path is None:
            return MoveResult(record, performed=False,
                              error=f"No destination for {record.provenance.value} file")

        if self.dry_run:
            self.logger.info(f"[dry run] {record.source_path} -> {record.destination_path}")
            return MoveResult(record, performed=False, dry_run=True)

        try:
            self.move_file_safely(record.source_path, record.destination_path)
        except Exception as e:
            self.logger.error(f"Failed to move {record.source_path} -> {record.destination_path}: {e}")
            return MoveResult(record, performed=False, error=str(e))

        self.logger.info(f"{record.source_path} -> {record.destination_path}")
        return MoveResult(record, performed=True)

    def move_records(self, records: Iterable[FileRecord]) -> List[MoveResult]:
        """Move each record independently; one failure never stops the rest."""
        return [self.move_record(record) for record in records]
