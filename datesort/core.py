"""
Core date classification and move planning.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from .constants import NUISANCE_FILENAMES, get_logger
from .errors import DirectoryNotFoundError
from .metadata import MetadataProvider, default_provider
from .timestamps import DateParser, Provenance, resolve_date


@dataclass(frozen=True)
class FileRecord:
    """Resolved date and planned destination of one file."""
    source_path: Path
    provenance: Provenance
    resolved_date: Optional[datetime] = None
    destination_path: Optional[Path] = None
    error: Optional[str] = None

    def __post_init__(self):
        if self.provenance.has_date != (self.resolved_date is not None):
            raise ValueError(f"{self.provenance.value} record for {self.source_path} "
                             f"has inconsistent resolved date: {self.resolved_date}")
        if (self.destination_path is None) != (self.resolved_date is None):
            raise ValueError(f"Destination for {self.source_path} must be set iff a date is resolved")

    @property
    def name(self) -> str:
        return self.source_path.name


def destination_for(target_dir: Path, filename: str, date: datetime) -> Path:
    """Return ``target_dir/YYYY/MM/filename`` for a resolved date."""
    return target_dir / f"{date.year:04d}" / f"{date.month:02d}" / filename


class DateSorter:
    """Builds the ordered sorting plan for the files of one directory."""

    def __init__(self, target: Path, provider: Optional[MetadataProvider] = None,
                 parser: Optional[DateParser] = None):
        self.target = Path(target).expanduser().resolve()
        self.provider = provider if provider is not None else default_provider()
        self.parser = parser or DateParser()
        self.logger = get_logger()

    def find_target_files(self) -> List[Path]:
        """List regular files directly inside the target, ordered by name."""
        if not self.target.is_dir():
            raise DirectoryNotFoundError(self.target)

        files = []
        for file_path in sorted(self.target.iterdir()):
            if not file_path.is_file():
                continue
            if file_path.name.lower() in NUISANCE_FILENAMES:
                self.logger.debug(f"Skipping nuisance file {file_path.name}")
                continue
            files.append(file_path.resolve())
        return files

    def classify_file(self, file_path: Path) -> FileRecord:
        """Resolve the date of a single file; failures yield an Error record."""
        try:
            mtime = datetime.fromtimestamp(file_path.stat().st_mtime)
            date_taken, media_created = self.provider.read_dates(file_path)
            provenance, resolved = resolve_date(date_taken, media_created, mtime, self.parser)
        except Exception as e:
            self.logger.error(f"Error reading metadata of {file_path}: {e}")
            return FileRecord(file_path, Provenance.ERROR, error=str(e))

        self.logger.debug(f"{file_path.name}: taken={date_taken!r} created={media_created!r} "
                          f"-> {provenance.value} {resolved}")

        if resolved is None:
            return FileRecord(file_path, provenance)
        return FileRecord(file_path, provenance, resolved,
                          destination_for(self.target, file_path.name, resolved))

    def build_plan(self, files: Optional[Iterable[Path]] = None) -> List[FileRecord]:
        """Classify every file, preserving enumeration order."""
        if files is None:
            files = self.find_target_files()
        files = list(files)

        self.logger.info(f"Classifying {len(files)} files in {self.target}")
        return [self.classify_file(file_path) for file_path in files]
