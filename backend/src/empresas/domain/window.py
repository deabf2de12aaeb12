"""
Rolling "last month" window used by the reporting queries.

The cutoff is one calendar month before the evaluation instant, not a
fixed 30-day offset. Day and time-of-day are preserved; a day that does
not exist in the target month overflows forward into the following month
(March 31 -> "February 31" -> March 3 in a non-leap year).

Pure functions, no I/O.
"""

from datetime import datetime, timedelta

from .models import as_utc, utcnow


def one_month_before(moment: datetime) -> datetime:
    """
    Subtract one calendar month from a timestamp.

    Examples:
        >>> one_month_before(datetime(2026, 3, 15, 9, 30))
        datetime.datetime(2026, 2, 15, 9, 30)
        >>> one_month_before(datetime(2026, 1, 10))
        datetime.datetime(2025, 12, 10, 0, 0)
        >>> one_month_before(datetime(2026, 3, 31))
        datetime.datetime(2026, 3, 3, 0, 0)
    """
    if moment.month == 1:
        year, month = moment.year - 1, 12
    else:
        year, month = moment.year, moment.month - 1

    # Anchor on the 1st so the replace is always valid, then add the days back
    first_of_month = moment.replace(year=year, month=month, day=1)
    return first_of_month + timedelta(days=moment.day - 1)


def last_month_cutoff(now: datetime | None = None) -> datetime:
    """
    Inclusive lower bound of the reporting window, in UTC.

    Records with a timestamp >= the returned value are inside the window.
    """
    return one_month_before(as_utc(now) if now is not None else utcnow())
