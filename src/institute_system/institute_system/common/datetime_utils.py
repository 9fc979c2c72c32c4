from __future__ import annotations

from datetime import date, datetime, time
from typing import Union

from ..core.exceptions import ValidationError

TimeLike = Union[str, time]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date (YYYY-MM-DD)")


def parse_hhmm(value: TimeLike) -> time:
    """Accept "HH:MM" (or "HH:MM:SS") strings and time objects."""
    if isinstance(value, time):
        return value.replace(microsecond=0)

    v = (value or "").strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError("Invalid time (HH:MM)")


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()
