"""Scheduling tools with Pydantic validation."""
from typing import Annotated

import structlog
from pydantic import BaseModel, Field

from clinic_data import (
    active_bookings,
    cancel_booking,
    create_booking,
    get_booking,
    get_provider,
    reschedule_booking,
)
from config import configure_logging, scoring_config, settings
from scheduling import (
    WorkHours,
    build_slot_request,
    find_conflicts,
    format_time,
    generate_suggestions as generate_slot_suggestions,
)

configure_logging(settings.log_level)
log = structlog.get_logger()

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}$"

# ============================================
# Tool Schemas (Pydantic models)
# ============================================


class CheckConflictInput(BaseModel):
    provider_id: Annotated[str, Field(min_length=1, description="Provider ID (e.g., prov-001)")]
    date: Annotated[str, Field(pattern=DATE_PATTERN, description="Date YYYY-MM-DD")]
    start_time: Annotated[str, Field(pattern=TIME_PATTERN, description="Start time HH:MM")]
    duration_minutes: Annotated[int, Field(gt=0, description="Length in minutes")] = 30


class ConflictInfo(BaseModel):
    confirmation_id: str | None
    start_time: str
    duration_minutes: int


class CheckConflictOutput(BaseModel):
    has_conflict: bool
    conflicts: list[ConflictInfo] = []


class GenerateSuggestionsInput(BaseModel):
    provider_id: Annotated[str, Field(min_length=1)]
    category: Annotated[str, Field(min_length=1, description="e.g., routine, follow-up, urgent")]
    duration_minutes: Annotated[int, Field(gt=0)] = 30
    horizon_days: Annotated[int, Field(gt=0, le=60)] = settings.horizon_days
    today: Annotated[str, Field(pattern=DATE_PATTERN, description="Reference date YYYY-MM-DD")] | None = None
    work_start: Annotated[str, Field(pattern=TIME_PATTERN)] | None = None
    work_end: Annotated[str, Field(pattern=TIME_PATTERN)] | None = None
    allow_weekends: bool = False


class GenerateSuggestionsOutput(BaseModel):
    suggestions: list[dict]


class BookAppointmentInput(BaseModel):
    patient_id: Annotated[str, Field(min_length=1)]
    provider_id: Annotated[str, Field(min_length=1)]
    date: Annotated[str, Field(pattern=DATE_PATTERN)]
    start_time: Annotated[str, Field(pattern=TIME_PATTERN)]
    duration_minutes: Annotated[int, Field(gt=0)] = 30
    category: Annotated[str, Field(min_length=1)] = "routine"
    idempotency_key: Annotated[str, Field(min_length=1)]
    notes: str | None = None


class BookAppointmentOutput(BaseModel):
    confirmation_id: str
    status: str
    reason: str | None = None


class RescheduleSlot(BaseModel):
    date: Annotated[str, Field(pattern=DATE_PATTERN)]
    start_time: Annotated[str, Field(pattern=TIME_PATTERN)]
    duration_minutes: Annotated[int, Field(gt=0)] | None = None


class RescheduleAppointmentInput(RescheduleSlot):
    confirmation_id: Annotated[str, Field(min_length=1)]


class CancelAppointmentInput(BaseModel):
    confirmation_id: Annotated[str, Field(min_length=1)]


class CancelAppointmentOutput(BaseModel):
    cancelled: bool
    status: str | None = None


# ============================================
# Tool Implementations
# ============================================


def check_conflict(input: CheckConflictInput) -> CheckConflictOutput:
    """Check a proposed slot against the provider's current active bookings."""
    slot = build_slot_request(input.provider_id, input.date, input.start_time, input.duration_minutes)
    conflicts = find_conflicts(active_bookings(input.provider_id), slot)
    log.info(
        "check_conflict",
        provider_id=input.provider_id,
        date=input.date,
        start_time=input.start_time,
        has_conflict=bool(conflicts),
    )
    return CheckConflictOutput(
        has_conflict=bool(conflicts),
        conflicts=[
            ConflictInfo(
                confirmation_id=b.booking_id,
                start_time=format_time(b.start_time),
                duration_minutes=b.duration_minutes,
            )
            for b in conflicts
        ],
    )


def generate_suggestions(input: GenerateSuggestionsInput) -> GenerateSuggestionsOutput:
    """Rank free slots for a provider. Suggestions are advisory, not reservations."""
    if not get_provider(input.provider_id):
        log.warning("provider_not_found", provider_id=input.provider_id)
        return GenerateSuggestionsOutput(suggestions=[])

    work_hours = WorkHours.parse(
        input.work_start or settings.work_start,
        input.work_end or settings.work_end,
    )
    candidates = generate_slot_suggestions(
        input.provider_id,
        input.category,
        input.duration_minutes,
        input.horizon_days,
        active_bookings(input.provider_id),
        today=input.today,
        work_hours=work_hours,
        allow_weekends=input.allow_weekends,
        config=scoring_config(settings),
    )
    log.info(
        "generate_suggestions",
        provider_id=input.provider_id,
        category=input.category,
        horizon_days=input.horizon_days,
        suggestions_found=len(candidates),
    )
    return GenerateSuggestionsOutput(suggestions=[c.to_dict() for c in candidates])


def book_appointment(input: BookAppointmentInput) -> BookAppointmentOutput:
    """Book an appointment (idempotent, conflict re-checked at write time)."""
    if not get_provider(input.provider_id):
        log.warning("provider_not_found", provider_id=input.provider_id)
        return BookAppointmentOutput(confirmation_id="", status="failed", reason="Unknown provider")

    result = create_booking(
        patient_id=input.patient_id,
        provider_id=input.provider_id,
        on_date=input.date,
        start_time=input.start_time,
        duration_minutes=input.duration_minutes,
        category=input.category,
        idempotency_key=input.idempotency_key,
        notes=input.notes,
    )
    log.info(
        "book_appointment",
        confirmation_id=result.confirmation_id,
        status=result.status,
        provider_id=input.provider_id,
    )
    return BookAppointmentOutput(
        confirmation_id=result.confirmation_id,
        status=result.status,
        reason=result.reason,
    )


def reschedule_appointment(input: RescheduleAppointmentInput) -> BookAppointmentOutput:
    """Move an existing appointment to a new slot."""
    result = reschedule_booking(
        input.confirmation_id,
        input.date,
        input.start_time,
        input.duration_minutes,
    )
    log.info("reschedule_appointment", confirmation_id=input.confirmation_id, status=result.status)
    return BookAppointmentOutput(
        confirmation_id=result.confirmation_id,
        status=result.status,
        reason=result.reason,
    )


def cancel_appointment(input: CancelAppointmentInput) -> CancelAppointmentOutput:
    """Cancel an appointment so its slot becomes free again."""
    if get_booking(input.confirmation_id) is None:
        return CancelAppointmentOutput(cancelled=False)
    appointment = cancel_booking(input.confirmation_id)
    log.info("cancel_appointment", confirmation_id=input.confirmation_id)
    return CancelAppointmentOutput(cancelled=True, status=appointment.status)


# ============================================
# Tool Definitions for LLM Function Calling
# ============================================

TOOL_DEFINITIONS = [
    {
        "type": "function",
        "function": {
            "name": "check_conflict",
            "description": "Check whether a proposed slot overlaps an existing booking for the provider",
            "parameters": {
                "type": "object",
                "properties": {
                    "provider_id": {"type": "string", "description": "Provider ID (e.g., prov-001)"},
                    "date": {"type": "string", "description": "Date YYYY-MM-DD"},
                    "start_time": {"type": "string", "description": "Start time HH:MM"},
                    "duration_minutes": {"type": "integer", "description": "Length in minutes (default 30)"},
                },
                "required": ["provider_id", "date", "start_time"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "generate_suggestions",
            "description": "Suggest the best free appointment slots for a provider over the next few days",
            "parameters": {
                "type": "object",
                "properties": {
                    "provider_id": {"type": "string"},
                    "category": {"type": "string", "description": "routine, follow-up, urgent or emergency"},
                    "duration_minutes": {"type": "integer"},
                    "horizon_days": {"type": "integer", "description": "Days to search (default 7)"},
                    "today": {"type": "string", "description": "Reference date YYYY-MM-DD"},
                    "work_start": {"type": "string", "description": "HH:MM"},
                    "work_end": {"type": "string", "description": "HH:MM"},
                    "allow_weekends": {"type": "boolean"},
                },
                "required": ["provider_id", "category"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "book_appointment",
            "description": "Book an appointment. The slot is re-checked for conflicts before it is saved.",
            "parameters": {
                "type": "object",
                "properties": {
                    "patient_id": {"type": "string"},
                    "provider_id": {"type": "string"},
                    "date": {"type": "string", "description": "YYYY-MM-DD"},
                    "start_time": {"type": "string", "description": "HH:MM"},
                    "duration_minutes": {"type": "integer"},
                    "category": {"type": "string"},
                    "idempotency_key": {"type": "string", "description": "Unique key to prevent duplicate bookings"},
                    "notes": {"type": "string"},
                },
                "required": ["patient_id", "provider_id", "date", "start_time", "idempotency_key"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "reschedule_appointment",
            "description": "Move an existing appointment to a new date and time",
            "parameters": {
                "type": "object",
                "properties": {
                    "confirmation_id": {"type": "string"},
                    "date": {"type": "string", "description": "YYYY-MM-DD"},
                    "start_time": {"type": "string", "description": "HH:MM"},
                    "duration_minutes": {"type": "integer"},
                },
                "required": ["confirmation_id", "date", "start_time"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "cancel_appointment",
            "description": "Cancel an appointment",
            "parameters": {
                "type": "object",
                "properties": {
                    "confirmation_id": {"type": "string"},
                },
                "required": ["confirmation_id"],
            },
        },
    },
]

TOOL_INPUTS = {
    "check_conflict": (CheckConflictInput, check_conflict),
    "generate_suggestions": (GenerateSuggestionsInput, generate_suggestions),
    "book_appointment": (BookAppointmentInput, book_appointment),
    "reschedule_appointment": (RescheduleAppointmentInput, reschedule_appointment),
    "cancel_appointment": (CancelAppointmentInput, cancel_appointment),
}


# ============================================
# Tool Executor
# ============================================

def execute_tool(name: str, arguments: dict) -> dict:
    """Execute a tool by name with validation."""
    if name not in TOOL_INPUTS:
        return {"error": f"Unknown tool: {name}"}
    input_cls, handler = TOOL_INPUTS[name]
    try:
        result = handler(input_cls(**arguments))
        return result.model_dump()
    except Exception as e:
        log.error("tool_execution_error", tool=name, error=str(e))
        return {"error": str(e)}
