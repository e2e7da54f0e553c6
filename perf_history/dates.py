"""
< Date handling for measurement runs >
1. Every Date is a naive `datetime` in UTC. Offsets found in commit-log dates are applied, then dropped.
2. Header dates use the commit-log layout, e.g. "Mon Mar 14 08:32:45 2016 -0700".
3. Filename dates follow `<test-name>--YYYY-MM-DD-HH-MM[-SS].json`.
4. Weeks start on Monday at 00:00.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Final

HEADER_DATE_FORMAT: Final[str] = '%a %b %d %H:%M:%S %Y %z'
FILENAME_DATE_FORMATS: Final[tuple[str, ...]] = ('%Y-%m-%d-%H-%M-%S', '%Y-%m-%d-%H-%M')
TEST_NAME_SEPARATOR: Final[str] = '--'
DOCUMENT_SUFFIX: Final[str] = '.json'

ONE_WEEK: Final[timedelta] = timedelta(weeks=1)

# Lower bound used for an unspecified range start.
EARLIEST: Final[datetime] = datetime.min


def weeks(n: int) -> timedelta:
    return timedelta(weeks=n)


def normalize(dt: datetime) -> datetime:
    """Convert an aware datetime to naive UTC. Naive input is assumed to be UTC already."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_header_date(value: str) -> datetime:
    """
    Parse a commit-log style date such as "Sat Jan 2 13:58:57 2016 +0000".

    Raises
    ------
    ValueError
        If the value does not match the commit-log layout. Bare "YYYY-MM-DD"
        strings are rejected so that the more precise filename date is used.
    """
    return normalize(datetime.strptime(value.strip(), HEADER_DATE_FORMAT))


def filename_date_part(filename: str) -> str:
    """Return the date segment between the first `--` and the `.json` suffix."""
    start = filename.find(TEST_NAME_SEPARATOR)
    if start < 0:
        raise ValueError(f"filename has no '{TEST_NAME_SEPARATOR}' separator: {filename}")
    rest = filename[start + len(TEST_NAME_SEPARATOR) :]
    end = rest.find(DOCUMENT_SUFFIX)
    return rest if end < 0 else rest[:end]


def parse_filename_date(filename: str) -> datetime:
    """
    Parse the date embedded in a document filename.

    Tries the layout with seconds first, then the one without.

    Raises
    ------
    ValueError
        If the filename has no date segment or it matches neither layout.
    """
    date_str = filename_date_part(filename)
    for fmt in FILENAME_DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            continue
    raise ValueError(f'unrecognised filename date: {date_str!r}')


def start_of_week(dt: datetime) -> datetime:
    midnight = dt.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=midnight.weekday())


def as_start(value: datetime | None) -> datetime:
    """Resolve an optional range start; unspecified means the earliest possible date."""
    return EARLIEST if value is None else normalize(value)


def as_end(value: datetime | None, last_date: datetime) -> datetime:
    """Resolve an optional range end; unspecified means the global last date."""
    return last_date if value is None else normalize(value)
