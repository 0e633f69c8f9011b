"""
Metadata providers that supply raw "Date taken" and "Media created" strings.
"""

import json
import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from . import constants
from .constants import DATE_TAKEN, MEDIA_CREATED, MOVIE_EXTENSIONS, get_logger
from .errors import MetadataReadError


logger = get_logger()


class MetadataProvider(ABC):
    """Capability for reading named date properties of files in a directory."""

    @abstractmethod
    def lookup_property(self, directory: Path, property_name: str) -> Optional[str]:
        """Return the backend key for ``property_name``, or None if unavailable."""

    @abstractmethod
    def read_property_value(self, directory: Path, filename: str,
                            property_name: str) -> Optional[str]:
        """Return the raw value of a property for one file, or None."""

    def read_dates(self, path: Path) -> Tuple[Optional[str], Optional[str]]:
        """Read the (date taken, media created) raw strings for a file."""
        return (self.read_property_value(path.parent, path.name, DATE_TAKEN),
                self.read_property_value(path.parent, path.name, MEDIA_CREATED))


def ensure_readable(path: Path) -> None:
    """Raise MetadataReadError when a file cannot be opened for reading."""
    if not path.is_file():
        raise MetadataReadError(f"Not a readable file: {path}")
    if not os.access(path, os.R_OK):
        raise MetadataReadError(f"Permission denied: {path}")


class ExiftoolMetadataProvider(MetadataProvider):
    """Reads EXIF, XMP and QuickTime date tags with exiftool."""

    TAGS = {
        DATE_TAKEN: ("DateTimeOriginal", "SubSecDateTimeOriginal"),
        MEDIA_CREATED: ("MediaCreateDate", "CreationDate", "CreateDate", "TrackCreateDate"),
    }

    def __init__(self):
        # exiftool output for the most recently read file
        self._cache_path: Optional[Path] = None
        self._cache: Dict[str, str] = {}

    def lookup_property(self, directory: Path, property_name: str) -> Optional[str]:
        if not constants.exiftool_available:
            return None
        tags = self.TAGS.get(property_name)
        return ",".join(tags) if tags else None

    def read_property_value(self, directory: Path, filename: str,
                            property_name: str) -> Optional[str]:
        if not self.lookup_property(directory, property_name):
            return None

        tags = self._read_tags(Path(directory) / filename)
        for tag in self.TAGS[property_name]:
            value = tags.get(tag)
            if value not in (None, ""):
                return str(value)
        return None

    def _read_tags(self, path: Path) -> Dict[str, str]:
        if path == self._cache_path:
            return self._cache

        ensure_readable(path)
        tags: Dict[str, str] = {}
        all_tags = sorted({tag for group in self.TAGS.values() for tag in group})
        try:
            result = subprocess.run(
                ["exiftool", "-q", "-json", "-s"] + [f"-{tag}" for tag in all_tags] + [str(path)],
                capture_output=True, text=True, check=True
            )
            data = json.loads(result.stdout)
            if data:
                tags = data[0]
        except subprocess.CalledProcessError as e:
            logger.debug(f"exiftool failed for {path}: {e}")
        except json.JSONDecodeError as e:
            logger.debug(f"Failed to parse exiftool JSON output for {path}: {e}")
        except OSError as e:
            raise MetadataReadError(f"Could not run exiftool on {path}: {e}") from e

        self._cache_path = path
        self._cache = tags
        return tags


class FfprobeMetadataProvider(MetadataProvider):
    """Reads container creation time of video files with ffprobe."""

    DATE_KEYS = ("com.apple.quicktime.creationdate", "creation_time")

    def lookup_property(self, directory: Path, property_name: str) -> Optional[str]:
        if not constants.ffprobe_available or property_name != MEDIA_CREATED:
            return None
        return ",".join(self.DATE_KEYS)

    def read_property_value(self, directory: Path, filename: str,
                            property_name: str) -> Optional[str]:
        path = Path(directory) / filename
        if path.suffix.lower() not in MOVIE_EXTENSIONS:
            return None
        if not self.lookup_property(directory, property_name):
            return None

        ensure_readable(path)
        try:
            result = subprocess.run([
                "ffprobe", "-v", "quiet",
                "-print_format", "json",
                "-show_format",
                str(path)
            ], capture_output=True, text=True, check=True)
            tags = json.loads(result.stdout).get("format", {}).get("tags", {})
        except subprocess.CalledProcessError as e:
            logger.debug(f"ffprobe failed for {path}: {e}")
            return None
        except json.JSONDecodeError as e:
            logger.debug(f"Failed to parse ffprobe JSON output for {path}: {e}")
            return None
        except OSError as e:
            raise MetadataReadError(f"Could not run ffprobe on {path}: {e}") from e

        for key in self.DATE_KEYS:
            if tags.get(key):
                return tags[key]
        return None


class ChainMetadataProvider(MetadataProvider):
    """Asks each provider in turn; the first non-empty value wins."""

    def __init__(self, providers: Sequence[MetadataProvider]):
        self.providers: List[MetadataProvider] = list(providers)

    def lookup_property(self, directory: Path, property_name: str) -> Optional[str]:
        for provider in self.providers:
            key = provider.lookup_property(directory, property_name)
            if key:
                return key
        return None

    def read_property_value(self, directory: Path, filename: str,
                            property_name: str) -> Optional[str]:
        for provider in self.providers:
            value = provider.read_property_value(directory, filename, property_name)
            if value:
                return value
        return None


class StaticMetadataProvider(MetadataProvider):
    """Serves property values from an in-memory mapping keyed by filename.

    A value that is an exception instance is raised instead of returned,
    which simulates unreadable files.
    """

    def __init__(self, values: Optional[Mapping[str, Mapping[str, object]]] = None):
        self.values = {name: dict(props) for name, props in (values or {}).items()}

    def lookup_property(self, directory: Path, property_name: str) -> Optional[str]:
        return property_name

    def read_property_value(self, directory: Path, filename: str,
                            property_name: str) -> Optional[str]:
        value = self.values.get(filename, {}).get(property_name)
        if isinstance(value, Exception):
            raise value
        return value


def default_provider() -> MetadataProvider:
    """Build a provider from the metadata tools installed on this system."""
    providers: List[MetadataProvider] = []
    if constants.exiftool_available:
        providers.append(ExiftoolMetadataProvider())
    if constants.ffprobe_available:
        providers.append(FfprobeMetadataProvider())
    if not providers:
        logger.warning("Neither exiftool nor ffprobe found; using modification times only")
    return ChainMetadataProvider(providers)
