"""Time-of-day and interval helpers shared by the detector and the generator."""
import re
from dataclasses import dataclass
from datetime import date, datetime, time

from .errors import InvalidRequest

MINUTES_PER_DAY = 24 * 60
TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def parse_date(value: date | str) -> date:
    """Accept a date or a YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidRequest(f"Malformed date: {value!r} (expected YYYY-MM-DD)")
    raise InvalidRequest(f"Cannot convert {type(value).__name__} to date")


def parse_time(value: time | str) -> time:
    """Accept a naive, whole-minute time or an HH:MM string."""
    if isinstance(value, str):
        if not TIME_RE.match(value.strip()):
            raise InvalidRequest(f"Malformed time: {value!r} (expected HH:MM)")
        try:
            value = time.fromisoformat(value.strip())
        except ValueError:
            raise InvalidRequest(f"Malformed time: {value!r} (expected HH:MM)")
    if not isinstance(value, time):
        raise InvalidRequest(f"Cannot convert {type(value).__name__} to time")
    if value.tzinfo is not None:
        raise InvalidRequest(f"Time {value.isoformat()} must be clinic-local, without a UTC offset")
    if value.second or value.microsecond:
        raise InvalidRequest(f"Time {value.isoformat()} must fall on a whole minute")
    return value


def require_positive_int(name: str, value) -> int:
    """Reject bools, non-integers and values <= 0."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequest(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidRequest(f"{name} must be positive, got {value}")
    return value


def to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def from_minutes(minutes: int) -> time:
    """Inverse of to_minutes; wraps past midnight."""
    minutes %= MINUTES_PER_DAY
    return time(minutes // 60, minutes % 60)


def format_time(t: time) -> str:
    return t.strftime("%H:%M")


@dataclass(frozen=True)
class Interval:
    """Half-open minute range [start, end) on a single date."""

    start: int
    end: int

    @classmethod
    def from_start(cls, start_time: time, duration_minutes: int) -> "Interval":
        start = to_minutes(start_time)
        return cls(start, start + duration_minutes)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        # Touching endpoints do not overlap: 10:00-10:30 and 10:30-11:00 are fine.
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class WorkHours:
    """Daily window slots must fit in."""

    start: time = time(9, 0)
    end: time = time(17, 0)

    def __post_init__(self):
        if to_minutes(self.end) <= to_minutes(self.start):
            raise InvalidRequest(
                f"Work hours end {format_time(self.end)} must be after start {format_time(self.start)}"
            )

    @classmethod
    def parse(cls, start: time | str, end: time | str) -> "WorkHours":
        return cls(parse_time(start), parse_time(end))

    def as_interval(self) -> Interval:
        return Interval(to_minutes(self.start), to_minutes(self.end))
