from .errors import (
    SchedulingError,
    InvalidRequest,
    SlotConflict,
)
from .intervals import (
    Interval,
    WorkHours,
    parse_date,
    parse_time,
    require_positive_int,
    to_minutes,
    from_minutes,
    format_time,
)
from .models import (
    Booking,
    SlotRequest,
    SlotCandidate,
    INACTIVE_STATUSES,
)
from .conflicts import (
    has_conflict,
    find_conflicts,
    build_slot_request,
    check_conflict,
)
from .suggestions import (
    ScoringConfig,
    SuggestionRequest,
    DEFAULT_SCORING,
    score_slot,
    suggest,
    generate_suggestions,
)

__all__ = [
    "SchedulingError",
    "InvalidRequest",
    "SlotConflict",
    "Interval",
    "WorkHours",
    "parse_date",
    "parse_time",
    "require_positive_int",
    "to_minutes",
    "from_minutes",
    "format_time",
    "Booking",
    "SlotRequest",
    "SlotCandidate",
    "INACTIVE_STATUSES",
    "has_conflict",
    "find_conflicts",
    "build_slot_request",
    "check_conflict",
    "ScoringConfig",
    "SuggestionRequest",
    "DEFAULT_SCORING",
    "score_slot",
    "suggest",
    "generate_suggestions",
]
