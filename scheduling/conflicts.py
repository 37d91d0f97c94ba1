"""Conflict detection between a provider's bookings and a proposed slot.

The detector is advisory. It checks a snapshot of bookings; whoever writes the
booking must run it again against the current set inside its own lock or
transaction, otherwise two callers can both see the slot as free.
"""
from collections.abc import Iterable
from datetime import date, time

from .errors import InvalidRequest
from .intervals import parse_date, parse_time, require_positive_int
from .models import Booking, SlotRequest


def _same_day_bookings(existing: Iterable[Booking], candidate: SlotRequest):
    for booking in existing:
        if booking.provider_id == candidate.provider_id and booking.date == candidate.date:
            yield booking


def find_conflicts(existing: Iterable[Booking], candidate: SlotRequest) -> list[Booking]:
    """Return every booking that overlaps the candidate, in input order.

    `existing` must already be filtered to active bookings.
    """
    target = candidate.interval
    return [b for b in _same_day_bookings(existing, candidate) if b.interval.overlaps(target)]


def has_conflict(existing: Iterable[Booking], candidate: SlotRequest) -> bool:
    """True if the candidate overlaps any booking of the same provider on the same date.

    Intervals are half-open, so back-to-back bookings do not conflict. Stops at
    the first overlap found.
    """
    target = candidate.interval
    return any(b.interval.overlaps(target) for b in _same_day_bookings(existing, candidate))


def build_slot_request(
    provider_id: str,
    on_date: date | str,
    start_time: time | str,
    duration_minutes: int,
) -> SlotRequest:
    """Parse and validate raw candidate fields."""
    if not provider_id:
        raise InvalidRequest("provider_id is required")
    return SlotRequest(
        provider_id=provider_id,
        date=parse_date(on_date),
        start_time=parse_time(start_time),
        duration_minutes=require_positive_int("duration_minutes", duration_minutes),
    )


def check_conflict(
    provider_id: str,
    on_date: date | str,
    start_time: time | str,
    duration_minutes: int,
    existing_bookings: Iterable[Booking],
) -> bool:
    """Validate the candidate, then report whether it clashes with `existing_bookings`."""
    candidate = build_slot_request(provider_id, on_date, start_time, duration_minutes)
    return has_conflict(existing_bookings, candidate)
