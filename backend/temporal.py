"""
Relative date resolution for natural-language todo input.

All dates are calendar dates taken from the reference instant's wall clock
in the configured zone. Weekday indexes run 0=Sunday..6=Saturday.
"""
import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Seoul"

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)
WEEKDAY_NAMES = ["일요일", "월요일", "화요일", "수요일", "목요일", "금요일", "토요일"]


def get_zone(tz: Optional[str] = None) -> ZoneInfo:
    key = tz or os.getenv("TODO_TIMEZONE", DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error("Unknown time zone %r", key)
        raise ConfigurationError(f"unknown time zone: {key}") from e


def now(tz: Optional[str] = None) -> datetime:
    """Current instant in the configured zone. The only wall-clock read."""
    return datetime.now(get_zone(tz))


def to_local(reference: datetime, tz: Optional[str] = None) -> datetime:
    """Aware instants are converted; naive ones are taken as local wall-clock time."""
    zone = get_zone(tz)
    if reference.tzinfo is None:
        return reference.replace(tzinfo=zone)
    return reference.astimezone(zone)


def weekday_index(d: date) -> int:
    """Sunday-based weekday index (Python's weekday() is Monday-based)."""
    return d.isoweekday() % 7


def next_weekday(today: date, target: int) -> date:
    """Next occurrence of target strictly after today; same weekday skips a full week."""
    days_ahead = (target - weekday_index(today) + 7) % 7 or 7
    return today + timedelta(days=days_ahead)


@dataclass(frozen=True)
class TemporalAnchors:
    today: date
    weekday: int
    tomorrow: date
    day_after_tomorrow: date

    def next_weekday(self, target: int) -> date:
        return next_weekday(self.today, target)

    @property
    def weekday_name(self) -> str:
        return WEEKDAY_NAMES[self.weekday]


def resolve(reference: datetime, tz: Optional[str] = None) -> TemporalAnchors:
    today = to_local(reference, tz).date()
    return TemporalAnchors(
        today=today,
        weekday=weekday_index(today),
        tomorrow=today + timedelta(days=1),
        day_after_tomorrow=today + timedelta(days=2),
    )


def format_local_datetime(reference: datetime, tz: Optional[str] = None) -> str:
    """Korean locale style timestamp, e.g. "2025. 1. 15. 오후 3:04:05"."""
    local = to_local(reference, tz)
    meridiem = "오전" if local.hour < 12 else "오후"
    hour = local.hour % 12 or 12
    return (
        f"{local.year}. {local.month}. {local.day}. "
        f"{meridiem} {hour}:{local.minute:02d}:{local.second:02d}"
    )
