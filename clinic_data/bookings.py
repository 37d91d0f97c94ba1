"""Booking storage (in-memory).

This is the writer side of scheduling: every create or reschedule re-runs the
conflict detector against the provider's current bookings while holding the
store lock, so two suggestions computed from the same stale snapshot cannot
both be committed, and an idempotency key is claimed at most once.
"""
import random
import string
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, time

import structlog

from scheduling import (
    Booking,
    INACTIVE_STATUSES,
    build_slot_request,
    find_conflicts,
    format_time,
)

log = structlog.get_logger()


@dataclass
class Appointment:
    confirmation_id: str
    patient_id: str
    provider_id: str
    date: date
    start_time: time
    duration_minutes: int
    category: str
    idempotency_key: str
    notes: str | None = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    status: str = "scheduled"

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_STATUSES

    def to_booking(self) -> Booking:
        return Booking(
            provider_id=self.provider_id,
            date=self.date,
            start_time=self.start_time,
            duration_minutes=self.duration_minutes,
            category=self.category,
            booking_id=self.confirmation_id,
            status=self.status,
        )

    def to_dict(self) -> dict:
        return {
            "confirmation_id": self.confirmation_id,
            "patient_id": self.patient_id,
            "provider_id": self.provider_id,
            "date": self.date.isoformat(),
            "start_time": format_time(self.start_time),
            "duration_minutes": self.duration_minutes,
            "category": self.category,
            "status": self.status,
            "notes": self.notes,
        }


@dataclass
class BookingResult:
    confirmation_id: str
    status: str  # "booked", "rescheduled" or "failed"
    reason: str | None = None


# In-memory storage
_appointments: dict[str, Appointment] = {}
_idempotency_keys: dict[str, str] = {}  # key -> confirmation_id
# Re-entrant: writers hold it across the re-check and call active_bookings inside.
_store_lock = threading.RLock()


def _generate_confirmation_id() -> str:
    chars = string.ascii_uppercase.replace("O", "").replace("I", "") + "23456789"
    while True:
        candidate = "".join(random.choices(chars, k=6))
        if candidate not in _appointments:
            return candidate


def _conflict_reason(conflicts: list[Booking]) -> str:
    return (
        "Time slot conflict: This time slot conflicts with an existing appointment at "
        f"{format_time(conflicts[0].start_time)}"
    )


def active_bookings(provider_id: str | None = None, exclude_id: str | None = None) -> list[Booking]:
    """Snapshot of active bookings, optionally for one provider."""
    with _store_lock:
        appointments = list(_appointments.values())
    return [
        a.to_booking()
        for a in appointments
        if a.is_active
        and (provider_id is None or a.provider_id == provider_id)
        and a.confirmation_id != exclude_id
    ]


def create_booking(
    patient_id: str,
    provider_id: str,
    on_date: date | str,
    start_time: time | str,
    duration_minutes: int,
    category: str,
    idempotency_key: str,
    notes: str | None = None,
) -> BookingResult:
    """Create a booking (idempotent). Raises InvalidRequest on malformed input."""
    slot = build_slot_request(provider_id, on_date, start_time, duration_minutes)

    with _store_lock:
        existing_id = _idempotency_keys.get(idempotency_key)
        if existing_id:
            return BookingResult(
                confirmation_id=existing_id,
                status="booked",
                reason="Idempotent request - returning existing booking",
            )

        conflicts = find_conflicts(active_bookings(provider_id), slot)
        if conflicts:
            log.info(
                "booking_conflict",
                provider_id=provider_id,
                date=slot.date.isoformat(),
                start_time=format_time(slot.start_time),
                conflicting=[b.booking_id for b in conflicts],
            )
            return BookingResult(confirmation_id="", status="failed", reason=_conflict_reason(conflicts))

        confirmation_id = _generate_confirmation_id()
        _appointments[confirmation_id] = Appointment(
            confirmation_id=confirmation_id,
            patient_id=patient_id,
            provider_id=provider_id,
            date=slot.date,
            start_time=slot.start_time,
            duration_minutes=slot.duration_minutes,
            category=category,
            idempotency_key=idempotency_key,
            notes=notes,
        )
        _idempotency_keys[idempotency_key] = confirmation_id

    return BookingResult(confirmation_id=confirmation_id, status="booked")


def reschedule_booking(
    confirmation_id: str,
    on_date: date | str,
    start_time: time | str,
    duration_minutes: int | None = None,
) -> BookingResult:
    """Move an active booking, re-checking against everything but itself."""
    appointment = get_booking(confirmation_id)
    if appointment is None:
        return BookingResult(confirmation_id=confirmation_id, status="failed", reason="Booking not found")

    slot = build_slot_request(
        appointment.provider_id,
        on_date,
        start_time,
        duration_minutes if duration_minutes is not None else appointment.duration_minutes,
    )

    with _store_lock:
        if not appointment.is_active:
            return BookingResult(
                confirmation_id=confirmation_id,
                status="failed",
                reason=f"Booking is {appointment.status}",
            )

        conflicts = find_conflicts(
            active_bookings(appointment.provider_id, exclude_id=confirmation_id), slot
        )
        if conflicts:
            return BookingResult(
                confirmation_id=confirmation_id,
                status="failed",
                reason=_conflict_reason(conflicts),
            )
        appointment.date = slot.date
        appointment.start_time = slot.start_time
        appointment.duration_minutes = slot.duration_minutes

    return BookingResult(confirmation_id=confirmation_id, status="rescheduled")


def _set_status(confirmation_id: str, status: str) -> Appointment | None:
    with _store_lock:
        appointment = _appointments.get(confirmation_id)
        if appointment is not None:
            appointment.status = status
    return appointment


def cancel_booking(confirmation_id: str) -> Appointment | None:
    return _set_status(confirmation_id, "cancelled")


def complete_booking(confirmation_id: str) -> Appointment | None:
    return _set_status(confirmation_id, "completed")


def get_booking(confirmation_id: str) -> Appointment | None:
    return _appointments.get(confirmation_id)


def list_bookings(provider_id: str | None = None) -> list[Appointment]:
    """All stored appointments (any status), ordered by date and time."""
    with _store_lock:
        appointments = list(_appointments.values())
    if provider_id is not None:
        appointments = [a for a in appointments if a.provider_id == provider_id]
    return sorted(appointments, key=lambda a: (a.date, a.start_time, a.confirmation_id))


def reset_bookings() -> None:
    """Reset all bookings (for testing)."""
    with _store_lock:
        _appointments.clear()
        _idempotency_keys.clear()
