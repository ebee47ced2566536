"""Date-string parsing for record validity ranges.

Records keep their dates as ``DD-MM-YYYY`` or ``DD/MM/YYYY`` strings. The
core only ever compares parsed calendar dates.
"""

import re
from datetime import date, timedelta

from rtotrack.exceptions import InvalidDateFormatError, InvalidDateRangeError

_SEPARATORS = re.compile(r"[-/]")


def parse_date(value: str, field: str | None = None) -> date:
    """Parse ``DD-MM-YYYY`` or ``DD/MM/YYYY`` into a date.

    Args:
        value: Date string; separators may be mixed
        field: Field name used in the error message

    Raises:
        InvalidDateFormatError: Wrong token count, non-numeric tokens,
            a year that is not four digits, or an impossible calendar date
    """
    if not isinstance(value, str):
        raise InvalidDateFormatError(value, field)

    parts = _SEPARATORS.split(value.strip())
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise InvalidDateFormatError(value, field)

    day, month, year = parts
    if len(year) != 4:
        raise InvalidDateFormatError(value, field)

    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        raise InvalidDateFormatError(value, field)


def format_date(value: date) -> str:
    """Format a date as ``DD-MM-YYYY``."""
    return value.strftime("%d-%m-%Y")


def expand_short_year(value: str) -> str:
    """Expand a two-digit year typed into a form.

    ``05/03/26`` becomes ``05-03-2026``; years 00-50 map to 2000-2050 and
    51-99 to 1951-1999. Anything else is returned unchanged so the core
    parser can reject it with a proper error.
    """
    parts = _SEPARATORS.split(value.strip())
    if len(parts) != 3 or not all(parts):
        return value

    day, month, year = parts
    if len(day) > 2 or len(month) > 2:
        return value
    if len(year) == 2 and year.isdigit():
        short = int(year)
        year = str(2000 + short if short <= 50 else 1900 + short)

    if len(year) == 4:
        return f"{day}-{month}-{year}"
    return value


def default_valid_to(valid_from: str, years: int = 1) -> str:
    """Suggest the last valid day of a term starting on ``valid_from``.

    A one-year term from 15-08-2025 ends on 14-08-2026. A start of 29 Feb
    rolls to 28 Feb of the target year before the day is subtracted.
    """
    start = parse_date(valid_from, "valid_from")
    try:
        anniversary = start.replace(year=start.year + years)
    except ValueError:
        anniversary = start.replace(year=start.year + years, day=28)
    return format_date(anniversary - timedelta(days=1))


def parse_range(valid_from: str, valid_to: str) -> tuple[date, date]:
    """Parse both ends of a validity range and check their order.

    Raises:
        InvalidDateFormatError: If either end cannot be parsed
        InvalidDateRangeError: If valid_from is after valid_to
    """
    start = parse_date(valid_from, "valid_from")
    end = parse_date(valid_to, "valid_to")
    if start > end:
        raise InvalidDateRangeError(valid_from, valid_to)
    return start, end
