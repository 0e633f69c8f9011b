"""
Shared constants, console and logger accessors for datesort.
"""

import logging
import shutil
import subprocess
from datetime import datetime
from functools import lru_cache

from rich.console import Console

PROGRAM = "datesort"

# Metadata property names requested from metadata providers
DATE_TAKEN = "Date taken"
MEDIA_CREATED = "Media created"

# MS-DOS epoch written by filesystems and archives without a real timestamp
SENTINEL_EPOCH = datetime(1980, 1, 1, 0, 0, 0)

# Report artifacts
CSV_FIELDS = ("FileName", "DateType", "Date", "Destination")
CSV_SUFFIX = "_SortResults.csv"
LOG_SUFFIX = "_SortLog.log"
STAMP_FORMAT = "%Y-%m-%d_%H%M%S"
DATE_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

# Container formats ffprobe can read a creation time from
MOVIE_EXTENSIONS = (
    ".3g2", ".3gp", ".asf", ".avi", ".flv", ".m2ts", ".m4v", ".mkv", ".mod",
    ".mov", ".mp4", ".mpeg", ".mpg", ".mts", ".mxf", ".ogv", ".ts", ".vob",
    ".webm", ".wmv",
)
NUISANCE_FILENAMES = (".ds_store", "thumbs.db", "desktop.ini")


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Return the console shared by the CLI, reports and log handlers."""
    return Console()


def get_logger() -> logging.Logger:
    """Return the program logger."""
    return logging.getLogger(PROGRAM)


def check_tool_availability(cmd: str, version_flag: str = "-ver") -> bool:
    """Check whether an external command-line tool can be executed."""
    if shutil.which(cmd) is None:
        return False
    try:
        subprocess.run([cmd, version_flag], capture_output=True, check=True, timeout=10)
        return True
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
        return False


exiftool_available = check_tool_availability("exiftool", "-ver")
ffprobe_available = check_tool_availability("ffprobe", "-version")
