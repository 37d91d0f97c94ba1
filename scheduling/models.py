"""Booking and slot data model."""
from dataclasses import dataclass, field
from datetime import date, time

from .intervals import Interval, format_time, from_minutes, to_minutes

INACTIVE_STATUSES = frozenset({"cancelled", "completed", "no-show"})


@dataclass(frozen=True)
class Booking:
    provider_id: str
    date: date
    start_time: time
    duration_minutes: int
    category: str = "routine"
    booking_id: str | None = None
    status: str = "scheduled"

    @property
    def interval(self) -> Interval:
        return Interval.from_start(self.start_time, self.duration_minutes)

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_STATUSES


@dataclass(frozen=True)
class SlotRequest:
    """A proposed booking handed to the conflict detector."""

    provider_id: str
    date: date
    start_time: time
    duration_minutes: int

    @property
    def interval(self) -> Interval:
        return Interval.from_start(self.start_time, self.duration_minutes)


@dataclass
class SlotCandidate:
    """Hypothetical free slot produced by the suggestion generator. Never persisted."""

    date: date
    start_time: time
    duration_minutes: int
    score: int = 0
    rationale: str = ""
    reasons: list[str] = field(default_factory=list)

    @property
    def end_time(self) -> time:
        return from_minutes(to_minutes(self.start_time) + self.duration_minutes)

    @property
    def interval(self) -> Interval:
        return Interval.from_start(self.start_time, self.duration_minutes)

    def sort_key(self) -> tuple:
        return (-self.score, self.date, self.start_time)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "start_time": format_time(self.start_time),
            "end_time": format_time(self.end_time),
            "duration_minutes": self.duration_minutes,
            "score": self.score,
            "rationale": self.rationale,
        }
