"""Calendar helpers shared by the stats engine and the history aggregator."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta

from ..errors import InvalidDateError

ISO_DATE_FORMAT = "%Y-%m-%d"

# English names regardless of process locale, so labels stay stable.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def format_date(value: date) -> str:
    """Return the canonical ``YYYY-MM-DD`` form of a calendar date."""

    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(ISO_DATE_FORMAT)


def parse_iso_date(value: object) -> date:
    """Parse a ``YYYY-MM-DD`` string into a date.

    ``date`` instances pass through. Anything else, including strings with a
    time component, raises :class:`InvalidDateError`.
    """

    if isinstance(value, datetime):
        raise InvalidDateError(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) != 10:
        raise InvalidDateError(value)
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateError(value) from exc


def resolve_today(now: date | datetime | None = None) -> date:
    """Reduce a reference instant to its calendar date, sampling the clock once if absent."""

    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def period_window(period: str, today: date) -> tuple[date, date]:
    """Return inclusive ``(start, end)`` bounds of the period containing ``today``.

    Weeks start on Monday. Unknown periods fall back to the single-day window.
    """

    if period == "weekly":
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    if period == "monthly":
        last_day = monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    if period == "yearly":
        return date(today.year, 1, 1), date(today.year, 12, 31)
    return today, today


def month_key(value: date) -> tuple[int, int]:
    return value.year, value.month


def month_label(year: int, month: int) -> str:
    """Render a display label such as ``"January 2024"``."""

    return f"{MONTH_NAMES[month - 1]} {year}"


__all__ = [
    "ISO_DATE_FORMAT",
    "MONTH_NAMES",
    "format_date",
    "month_key",
    "month_label",
    "parse_iso_date",
    "period_window",
    "resolve_today",
]
