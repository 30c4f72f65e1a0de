"""UTC calendar-day handling.

A standup belongs to exactly one UTC calendar day, stored as a ``date``.
Every conversion from client input and every day or range query goes through
this module so that creation, lookup and range listing agree on boundaries.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Annotated, Any, Union

from pydantic import BeforeValidator

from standupsync.errors import InvalidRequestError

DayInput = Union[date, datetime, str]


def utc_now() -> datetime:
    """Current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Current UTC calendar day."""
    return utc_now().date()


def to_utc_day(value: Any) -> date:
    """Normalize a date, datetime or ISO-8601 string to a UTC calendar day.

    Aware datetimes are converted to UTC before truncation. Naive datetimes
    are taken to already be in UTC. Strings may be a bare ``YYYY-MM-DD`` or a
    full timestamp, with ``Z`` accepted as the UTC suffix.

    Args:
        value: The day-like value to normalize.

    Returns:
        The UTC calendar day.

    Raises:
        InvalidRequestError: If the value cannot be interpreted as a day.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidRequestError("Date is required")
        if len(text) == 10:
            try:
                return date.fromisoformat(text)
            except ValueError as e:
                raise InvalidRequestError(f"Invalid date: {value}") from e
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return to_utc_day(datetime.fromisoformat(text))
        except ValueError as e:
            raise InvalidRequestError(f"Invalid date: {value}") from e
    raise InvalidRequestError(f"Invalid date: {value!r}")


def day_bounds(day: date) -> tuple[date, date]:
    """Half-open ``[day, next_day)`` bounds for a single day."""
    return day, day + timedelta(days=1)


def range_bounds(start: date, end: date) -> tuple[date, date]:
    """Half-open bounds covering the inclusive range ``start..end``.

    Raises:
        InvalidRequestError: If ``start`` falls after ``end``.
    """
    if start > end:
        raise InvalidRequestError("startDate must not be after endDate")
    return start, end + timedelta(days=1)


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the ISO week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


UTCDay = Annotated[date, BeforeValidator(to_utc_day)]
