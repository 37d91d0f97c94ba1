"""Ranked availability suggestions across a rolling horizon.

Search space is horizon_days x (work window / slot step), so a call is a small
bounded in-memory scan. Results are advisory; see conflicts.py for the
commit-time re-check the booking writer owns. Nothing here logs; callers
record outcomes (see tools.generate_suggestions).
"""
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, time, timedelta

from .conflicts import has_conflict
from .errors import InvalidRequest
from .intervals import WorkHours, from_minutes, parse_date, require_positive_int
from .models import Booking, SlotCandidate, SlotRequest

SATURDAY = 5


@dataclass(frozen=True)
class ScoringConfig:
    """Knobs for the suggestion heuristic.

    base_score: every surviving slot starts here.
    morning_bonus: added when the slot starts before `morning_cutoff`.
    early_morning_cutoff: slots before this are described as "less crowded"
        (wording only, no score effect).
    day_decay_weight: adds (horizon_days - day_offset) * weight, so earlier
        days rank higher.
    urgent_same_day_bonus: added for urgent categories on day 0.
    urgent_categories: categories that get the same-day bonus and may be
        booked on weekends.
    slot_step_minutes: spacing of candidate start times.
    limit: how many suggestions to return.
    """

    base_score: int = 100
    morning_bonus: int = 20
    morning_cutoff: time = time(12, 0)
    early_morning_cutoff: time = time(10, 0)
    day_decay_weight: int = 5
    urgent_same_day_bonus: int = 50
    urgent_categories: frozenset[str] = frozenset({"urgent", "emergency"})
    slot_step_minutes: int = 30
    limit: int = 6

    def is_urgent(self, category: str) -> bool:
        return category.strip().lower() in self.urgent_categories


DEFAULT_SCORING = ScoringConfig()


@dataclass(frozen=True)
class SuggestionRequest:
    provider_id: str
    category: str
    duration_minutes: int
    today: date
    horizon_days: int = 7
    work_hours: WorkHours = field(default_factory=WorkHours)
    allow_weekends: bool = False


def _validate(request: SuggestionRequest, config: ScoringConfig) -> None:
    if not request.provider_id:
        raise InvalidRequest("provider_id is required")
    require_positive_int("duration_minutes", request.duration_minutes)
    require_positive_int("horizon_days", request.horizon_days)
    require_positive_int("slot_step_minutes", config.slot_step_minutes)
    require_positive_int("limit", config.limit)


def _day_phrase(day_offset: int) -> str:
    if day_offset == 0:
        return "Available today"
    if day_offset == 1:
        return "Available tomorrow"
    return "Available slot"


def score_slot(
    candidate: SlotCandidate,
    day_offset: int,
    request: SuggestionRequest,
    config: ScoringConfig = DEFAULT_SCORING,
) -> SlotCandidate:
    """Fill in score, reasons and rationale on the candidate and return it."""
    score = config.base_score
    reasons = []
    urgent = config.is_urgent(request.category)

    if urgent and day_offset == 0:
        score += config.urgent_same_day_bonus
        reasons.append("Same-day urgent priority")
    elif urgent:
        reasons.append("Available for emergency appointment")

    if candidate.start_time < config.morning_cutoff:
        score += config.morning_bonus
        if candidate.start_time < config.early_morning_cutoff:
            reasons.append("Early morning - less crowded")
        else:
            reasons.append("Morning slot - optimal for consultations")

    score += (request.horizon_days - day_offset) * config.day_decay_weight
    reasons.append(_day_phrase(day_offset))

    candidate.score = score
    candidate.reasons = reasons
    candidate.rationale = "; ".join(reasons)
    return candidate


def iter_candidate_days(request: SuggestionRequest, config: ScoringConfig = DEFAULT_SCORING):
    """Yield (day_offset, date) for every day in the horizon the request may use."""
    weekends_ok = request.allow_weekends or config.is_urgent(request.category)
    for day_offset in range(request.horizon_days):
        day = request.today + timedelta(days=day_offset)
        if day.weekday() >= SATURDAY and not weekends_ok:
            continue
        yield day_offset, day


def iter_day_starts(work_hours: WorkHours, duration_minutes: int, step_minutes: int):
    """Yield start times on the grid whose slot ends inside the work window."""
    window = work_hours.as_interval()
    for start in range(window.start, window.end - duration_minutes + 1, step_minutes):
        yield from_minutes(start)


def suggest(
    existing: Iterable[Booking],
    request: SuggestionRequest,
    config: ScoringConfig = DEFAULT_SCORING,
) -> list[SlotCandidate]:
    """Return up to `config.limit` conflict-free slots, best first.

    Ties are broken by earliest (date, start_time), so identical inputs always
    give the identical list. An empty list means no availability in the
    horizon; it is not an error.
    """
    _validate(request, config)
    existing = [b for b in existing if b.provider_id == request.provider_id]

    survivors = []
    for day_offset, day in iter_candidate_days(request, config):
        for start in iter_day_starts(request.work_hours, request.duration_minutes, config.slot_step_minutes):
            slot = SlotRequest(request.provider_id, day, start, request.duration_minutes)
            if has_conflict(existing, slot):
                continue
            candidate = SlotCandidate(date=day, start_time=start, duration_minutes=request.duration_minutes)
            survivors.append(score_slot(candidate, day_offset, request, config))

    survivors.sort(key=SlotCandidate.sort_key)
    return survivors[: config.limit]


def generate_suggestions(
    provider_id: str,
    category: str,
    duration_minutes: int,
    horizon_days: int,
    existing_bookings: Iterable[Booking],
    *,
    today: date | str | None = None,
    work_hours: WorkHours | None = None,
    allow_weekends: bool = False,
    config: ScoringConfig = DEFAULT_SCORING,
) -> list[SlotCandidate]:
    """Build a SuggestionRequest from raw fields and run `suggest`.

    `today` defaults to the current local date; pass it explicitly for
    reproducible results.
    """
    request = SuggestionRequest(
        provider_id=provider_id,
        category=category,
        duration_minutes=duration_minutes,
        horizon_days=horizon_days,
        today=parse_date(today) if today is not None else date.today(),
        work_hours=work_hours or WorkHours(),
        allow_weekends=allow_weekends,
    )
    return suggest(existing_bookings, request, config)
