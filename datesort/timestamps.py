"""Date-string parsing and capture-date resolution."""

import re
import zoneinfo
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Tuple

from .constants import SENTINEL_EPOCH, get_logger


logger = get_logger()

# Anything outside printable ASCII, e.g. the U+200E/U+200F marks some shells
# wrap around every date component
NON_PRINTABLE = re.compile(r'[^\x20-\x7E]')

# ISO 8601 and raw EXIF layouts (year first, any of - : / . as separator)
ISO_PATTERN = re.compile(
    r'^(\d{4})[-:/.](\d{1,2})[-:/.](\d{1,2})'
    r'(?:[T ](\d{1,2}):(\d{2})(?::(\d{2})(?:\.(\d+))?)?)?'
    r'\s*(Z|[+-]\d{2}:?\d{2})?$'
)

TIME_SUFFIXES = ("", " %H:%M", " %H:%M:%S", " %I:%M %p", " %I:%M:%S %p")
DAY_FIRST_DATES = ("%d/%m/%Y", "%d.%m.%Y", "%d-%m-%Y")
MONTH_FIRST_DATES = ("%m/%d/%Y", "%m-%d-%Y")
NAMED_MONTH_DATES = ("%d %B %Y", "%d %b %Y", "%B %d, %Y", "%b %d, %Y", "%B %d %Y", "%b %d %Y")


class Provenance(str, Enum):
    """Source tier of a file's effective date."""

    DATE_TAKEN = "DateTaken"
    MEDIA_CREATED = "MediaCreated"
    DATE_MODIFIED = "DateModified"
    NONE_FOUND = "NoneFound"
    ERROR = "Error"

    @property
    def is_trusted(self) -> bool:
        return self in (Provenance.DATE_TAKEN, Provenance.MEDIA_CREATED)

    @property
    def is_fallback(self) -> bool:
        return self is Provenance.DATE_MODIFIED

    @property
    def has_date(self) -> bool:
        return self not in (Provenance.NONE_FOUND, Provenance.ERROR)


def clean_date_string(raw: Optional[str]) -> str:
    """Drop non-printable characters and collapse runs of whitespace."""
    if not raw:
        return ""
    return " ".join(NON_PRINTABLE.sub("", raw).split())


def _expand(dates: Tuple[str, ...]) -> List[str]:
    return [date + suffix for date in dates for suffix in TIME_SUFFIXES]


class DateParser:
    """Parses the documented set of date layouts into naive datetimes.

    Numeric day/month layouts are ambiguous; ``date_order`` ("DMY" or "MDY")
    decides which reading is tried first, the other is tried second. Values
    carrying a UTC offset are converted to ``timezone`` (system local time
    when unset) before the offset is dropped.
    """

    def __init__(self, date_order: str = "DMY", timezone_name: Optional[str] = None):
        date_order = date_order.upper()
        if date_order not in ("DMY", "MDY"):
            raise ValueError(f"Unsupported date order: {date_order}")
        self.date_order = date_order
        self.timezone_name = timezone_name
        self._tz = zoneinfo.ZoneInfo(timezone_name) if timezone_name else None

        if date_order == "DMY":
            numeric = DAY_FIRST_DATES + MONTH_FIRST_DATES
        else:
            numeric = MONTH_FIRST_DATES + DAY_FIRST_DATES
        self.formats = _expand(numeric) + _expand(NAMED_MONTH_DATES)

    def parse(self, raw: Optional[str]) -> Optional[datetime]:
        """Return the parsed date, or None if ``raw`` matches no known layout."""
        text = clean_date_string(raw)
        if not text:
            return None

        parsed = self._parse_iso(text)
        if parsed:
            return parsed

        for fmt in self.formats:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

        logger.debug(f"Unrecognized date string: {text!r}")
        return None

    def _parse_iso(self, text: str) -> Optional[datetime]:
        match = ISO_PATTERN.match(text)
        if not match:
            return None

        year, month, day, hour, minute, second, fraction, offset = match.groups()
        microsecond = int(fraction.ljust(6, '0')[:6]) if fraction else 0
        try:
            parsed = datetime(int(year), int(month), int(day),
                              int(hour or 0), int(minute or 0), int(second or 0),
                              microsecond)
        except ValueError:
            # Zeroed EXIF placeholders like 0000:00:00 00:00:00
            return None

        if not offset:
            return parsed

        try:
            if offset == 'Z':
                tzinfo = timezone.utc
            else:
                digits = offset[1:].replace(':', '')
                sign = 1 if offset[0] == '+' else -1
                minutes = sign * (int(digits[:2]) * 60 + int(digits[2:]))
                tzinfo = timezone(timedelta(minutes=minutes))

            aware = parsed.replace(tzinfo=tzinfo)
            local = aware.astimezone(self._tz) if self._tz else aware.astimezone()
        except (ValueError, OverflowError):
            # Offsets of a day or more, or conversions past year 1 or 9999
            return None
        return local.replace(tzinfo=None)


DEFAULT_PARSER = DateParser()


def resolve_date(date_taken_raw: Optional[str], media_created_raw: Optional[str],
                 file_mtime: datetime,
                 parser: Optional[DateParser] = None) -> Tuple[Provenance, Optional[datetime]]:
    """Pick the most trustworthy date for a file.

    Date taken wins over media created, which wins over the modification
    time. A modification time equal to the 1980-01-01 sentinel counts as
    missing.
    """
    parser = parser or DEFAULT_PARSER

    for provenance, raw in ((Provenance.DATE_TAKEN, date_taken_raw),
                            (Provenance.MEDIA_CREATED, media_created_raw)):
        if not raw:
            continue
        parsed = parser.parse(raw)
        if parsed:
            return provenance, parsed

    if file_mtime != SENTINEL_EPOCH:
        return Provenance.DATE_MODIFIED, file_mtime

    return Provenance.NONE_FOUND, None
