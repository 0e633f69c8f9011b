"""
Exception types raised by datesort.
"""

from pathlib import Path


class DateSortError(Exception):
    """Base error for the project."""


class DirectoryNotFoundError(DateSortError):
    """Target directory is missing; raised before any file is processed."""

    def __init__(self, path: Path):
        super().__init__(f"Target directory does not exist: {path}")
        self.path = path


class MetadataReadError(DateSortError):
    """A file's metadata could not be accessed (locked, permission denied)."""


class DestinationExistsError(DateSortError):
    """A move would overwrite an existing file."""

    def __init__(self, path: Path):
        super().__init__(f"Destination already exists: {path}")
        self.path = path


class MoveError(DateSortError):
    """A move did not leave the file at its destination."""


class WorkflowError(DateSortError):
    """A session step was invoked out of order."""
