"""Calendar-date arithmetic and pt-BR display formatting."""

import math
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from config.settings import DATE_FORMAT, DATETIME_FORMAT, DISPLAY_TIMEZONE

# Dates without a time of day are pinned to midday so that converting them to
# a point in time never crosses a day boundary when an offset is applied.
NEUTRAL_HOUR = time(12, 0)
SECONDS_PER_DAY = 86400

_INPUT_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")


def utcnow() -> datetime:
    """Current timestamp, timezone-aware in UTC."""
    return datetime.now(timezone.utc)


def display_timezone() -> Optional[tzinfo]:
    """Configured display timezone, or None for the system local time."""
    if not DISPLAY_TIMEZONE:
        return None
    return ZoneInfo(DISPLAY_TIMEZONE)


def local_day(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of *moment* as seen on the local wall clock."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz or display_timezone()).date()


def days_until(target_date: date, reference_now: datetime, tz: Optional[tzinfo] = None) -> int:
    """Whole calendar days from the day of *reference_now* to *target_date*.

    Both sides are reduced to a calendar day and pinned to ``NEUTRAL_HOUR``
    before subtracting, so the result is 0 for today, negative once the date
    has passed and positive for future dates.
    """
    target = datetime.combine(target_date, NEUTRAL_HOUR)
    reference = datetime.combine(local_day(reference_now, tz), NEUTRAL_HOUR)
    return math.ceil((target - reference).total_seconds() / SECONDS_PER_DAY)


def parse_calendar_date(text: str) -> date:
    """Parse ``YYYY-MM-DD`` or ``DD/MM/YYYY`` into a date.

    Raises:
        ValueError: if *text* matches neither layout.
    """
    value = (text or "").strip()
    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Data inválida: {text!r} (use AAAA-MM-DD ou DD/MM/AAAA)")


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def format_timestamp_iso(moment: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_timestamp(moment: datetime, tz: Optional[tzinfo] = None) -> str:
    if moment.tzinfo is not None:
        moment = moment.astimezone(tz or display_timezone())
    return moment.strftime(DATETIME_FORMAT)
