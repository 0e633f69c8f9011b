"""
datesort - Sort photos and videos into year/month folders by capture date.

Each file in a target directory is dated by its "Date taken" metadata, then
its "Media created" metadata, then its modification time, and moved into
``<target>/<year>/<month>/`` after the plan has been previewed and confirmed.
"""

__version__ = "1.0.0"
__copyright__ = "MIT License"


# Public API
from .cli import main
from .config import Config
from .core import DateSorter, FileRecord, destination_for
from .file_operations import FileOperations, MoveResult
from .metadata import MetadataProvider, StaticMetadataProvider, default_provider
from .report import ReportSettings, ResultsReporter
from .timestamps import DateParser, Provenance, resolve_date
from .workflow import SortSession, Stage

__all__ = [ "main", "Config", "DateSorter", "FileRecord", "destination_for", "FileOperations",
            "MoveResult", "MetadataProvider", "StaticMetadataProvider", "default_provider",
            "ReportSettings", "ResultsReporter", "DateParser", "Provenance", "resolve_date",
            "SortSession", "Stage" ]
