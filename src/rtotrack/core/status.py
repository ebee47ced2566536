"""Status classification for time-bounded records."""

from datetime import date, datetime, timedelta

from rtotrack.core.dates import parse_date
from rtotrack.models.record import StatusType


def classify(
    valid_to: date,
    reference_date: date | datetime,
    expiring_soon_window_days: int,
) -> StatusType:
    """Classify a record by its last valid day.

    Comparison is by calendar day: the time of day in ``reference_date`` is
    ignored and the window's last day is included.

    Args:
        valid_to: Last valid day of the record
        reference_date: "Today" for the check
        expiring_soon_window_days: Days ahead that count as expiring soon

    Returns:
        EXPIRED if valid_to is before the reference day, EXPIRING_SOON if it
        falls within the window (boundary day included), else ACTIVE

    Raises:
        ValueError: If the window is negative
    """
    if expiring_soon_window_days < 0:
        raise ValueError("expiring_soon_window_days must be zero or more")

    if isinstance(valid_to, datetime):
        valid_to = valid_to.date()
    today = reference_date.date() if isinstance(reference_date, datetime) else reference_date
    window_end = today + timedelta(days=expiring_soon_window_days)

    if valid_to < today:
        return StatusType.EXPIRED
    if valid_to <= window_end:
        return StatusType.EXPIRING_SOON
    return StatusType.ACTIVE


def classify_string(
    valid_to: str,
    reference_date: date | datetime,
    expiring_soon_window_days: int,
) -> StatusType:
    """Parse a ``DD-MM-YYYY`` string and classify it.

    Raises:
        InvalidDateFormatError: If ``valid_to`` cannot be parsed
    """
    return classify(
        parse_date(valid_to, "valid_to"),
        reference_date,
        expiring_soon_window_days,
    )
