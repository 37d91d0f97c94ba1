"""Tests for the suggestion generator."""
from datetime import date, time

import pytest

from scheduling import (
    Booking,
    InvalidRequest,
    ScoringConfig,
    SlotCandidate,
    SlotRequest,
    SuggestionRequest,
    WorkHours,
    generate_suggestions,
    has_conflict,
    score_slot,
    suggest,
)

MONDAY = date(2024, 1, 15)
SATURDAY = date(2024, 1, 13)


def request(**overrides) -> SuggestionRequest:
    fields = {
        "provider_id": "P1",
        "category": "consultation",
        "duration_minutes": 30,
        "horizon_days": 3,
        "today": MONDAY,
    }
    fields.update(overrides)
    return SuggestionRequest(**fields)


@pytest.fixture
def existing():
    return [Booking("P1", MONDAY, time(10, 0), 30)]


class TestScenario:
    """The 2024-01-15 walkthrough: one 10:00 booking, three-day horizon."""

    def test_returns_six_slots(self, existing):
        """Test default limit is six."""
        assert len(suggest(existing, request())) == 6

    def test_top_slots_are_today_mornings(self, existing):
        """Test the five free morning slots today rank first, then tomorrow 09:00."""
        result = suggest(existing, request())
        assert [(c.date, c.start_time) for c in result] == [
            (MONDAY, time(9, 0)),
            (MONDAY, time(9, 30)),
            (MONDAY, time(10, 30)),
            (MONDAY, time(11, 0)),
            (MONDAY, time(11, 30)),
            (date(2024, 1, 16), time(9, 0)),
        ]
        assert [c.score for c in result] == [135, 135, 135, 135, 135, 130]

    def test_earlier_day_and_morning_ranked_higher(self, existing):
        """Test 01-15 09:00 outranks 01-17 09:00 and 01-15 14:00."""
        everything = suggest(existing, request(), ScoringConfig(limit=1000))
        by_slot = {(c.date, c.start_time): c for c in everything}
        today_nine = by_slot[(MONDAY, time(9, 0))]
        assert today_nine.score > by_slot[(date(2024, 1, 17), time(9, 0))].score
        assert today_nine.score > by_slot[(MONDAY, time(14, 0))].score
        assert everything.index(today_nine) < everything.index(by_slot[(MONDAY, time(14, 0))])

    def test_slots_stay_in_work_hours(self, existing):
        """Test every slot starts and ends within 09:00-17:00 across the horizon."""
        everything = suggest(existing, request(), ScoringConfig(limit=1000))
        assert {c.date for c in everything} == {MONDAY, date(2024, 1, 16), date(2024, 1, 17)}
        for c in everything:
            assert time(9, 0) <= c.start_time
            assert c.end_time <= time(17, 0)

    def test_rationale(self, existing):
        """Test rationale reflects which bonuses applied."""
        result = suggest(existing, request())
        assert result[0].rationale == "Early morning - less crowded; Available today"
        assert result[2].rationale == "Morning slot - optimal for consultations; Available today"
        assert result[5].rationale == "Early morning - less crowded; Available tomorrow"


class TestFiltering:
    """Tests for candidate enumeration and conflict filtering."""

    def test_suggestions_never_conflict(self):
        """Test every returned slot passes the conflict detector."""
        existing = [
            Booking("P1", MONDAY, time(9, 15), 45),
            Booking("P1", MONDAY, time(13, 10), 40),
            Booking("P1", date(2024, 1, 16), time(9, 0), 150),
        ]
        result = suggest(existing, request(duration_minutes=45), ScoringConfig(limit=1000))
        assert result
        for c in result:
            slot = SlotRequest("P1", c.date, c.start_time, c.duration_minutes)
            assert has_conflict(existing, slot) is False

    def test_other_provider_bookings_ignored(self):
        """Test another provider's bookings do not block slots."""
        existing = [Booking("P2", MONDAY, time(9, 0), 480)]
        result = suggest(existing, request())
        assert result[0].date == MONDAY
        assert result[0].start_time == time(9, 0)

    def test_fully_booked_returns_empty(self):
        """Test a provider booked solid through the horizon gets an empty list."""
        existing = [
            Booking("P1", date(2024, 1, 15 + offset), time(9, 0), 480)
            for offset in range(3)
        ]
        assert suggest(existing, request()) == []

    def test_duration_longer_than_window_returns_empty(self):
        assert suggest([], request(duration_minutes=600)) == []

    def test_slot_must_end_inside_window(self):
        """Test a 60-minute slot never starts after 16:00."""
        everything = suggest([], request(duration_minutes=60, horizon_days=1), ScoringConfig(limit=1000))
        assert max(c.start_time for c in everything) == time(16, 0)

    def test_custom_work_hours_and_step(self):
        """Test work hours and grid step shape the candidate set."""
        req = request(horizon_days=1, duration_minutes=60, work_hours=WorkHours(time(8), time(10)))
        result = suggest([], req, ScoringConfig(limit=1000, slot_step_minutes=30))
        assert [c.start_time for c in result] == [time(8, 0), time(8, 30), time(9, 0)]


class TestWeekends:
    """Tests for weekend handling."""

    def test_routine_skips_weekend(self):
        """Test Saturday and Sunday are skipped for routine care."""
        result = suggest([], request(today=SATURDAY), ScoringConfig(limit=1000))
        assert {c.date for c in result} == {MONDAY}
        # Monday is day offset 2 in a 3-day horizon
        assert result[0].score == 100 + 20 + 5

    def test_allow_weekends(self):
        result = suggest([], request(today=SATURDAY, allow_weekends=True))
        assert result[0].date == SATURDAY

    @pytest.mark.parametrize("category", ["urgent", "emergency", "Emergency "])
    def test_urgent_categories_use_weekends(self, category):
        """Test urgent care may be booked on weekends with the same-day bonus."""
        result = suggest([], request(today=SATURDAY, category=category))
        assert result[0].date == SATURDAY
        assert result[0].score == 100 + 20 + 15 + 50


class TestScoring:
    """Tests for the additive heuristic."""

    def test_urgent_same_day_bonus(self):
        result = suggest([], request(category="urgent"))
        assert result[0].score == 185
        assert "Same-day urgent priority" in result[0].reasons

    def test_urgent_later_day_has_no_bonus(self):
        candidate = SlotCandidate(date(2024, 1, 16), time(14, 0), 30)
        scored = score_slot(candidate, 1, request(category="urgent"))
        assert scored.score == 100 + 10
        assert scored.rationale == "Available for emergency appointment; Available tomorrow"

    def test_afternoon_has_no_morning_bonus(self):
        candidate = SlotCandidate(MONDAY, time(12, 0), 30)
        scored = score_slot(candidate, 0, request())
        assert scored.score == 100 + 15
        assert scored.rationale == "Available today"

    def test_later_day_phrase(self):
        candidate = SlotCandidate(date(2024, 1, 18), time(15, 0), 30)
        scored = score_slot(candidate, 3, request(horizon_days=7))
        assert scored.rationale == "Available slot"

    def test_custom_config(self):
        """Test configured weights replace the defaults."""
        config = ScoringConfig(base_score=0, morning_bonus=0, day_decay_weight=1, limit=2)
        result = suggest([], request(), config)
        assert [c.score for c in result] == [3, 3]
        assert [c.start_time for c in result] == [time(9, 0), time(9, 30)]


class TestDeterminism:
    """Tests for ranking stability."""

    def test_identical_inputs_identical_output(self, existing):
        first = suggest(existing, request(), ScoringConfig(limit=50))
        second = suggest(list(existing), request(), ScoringConfig(limit=50))
        assert first == second

    def test_ties_broken_by_date_then_time(self):
        result = suggest([], request(), ScoringConfig(limit=1000, morning_bonus=0, day_decay_weight=0))
        keys = [(c.date, c.start_time) for c in result]
        assert keys == sorted(keys)


class TestValidation:
    """Tests for precondition checks."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"duration_minutes": 0},
            {"duration_minutes": -30},
            {"horizon_days": 0},
            {"provider_id": ""},
            {"duration_minutes": "30"},
            {"duration_minutes": None},
            {"horizon_days": 2.5},
            {"horizon_days": None},
            {"horizon_days": True},
        ],
    )
    def test_invalid_request(self, overrides):
        with pytest.raises(InvalidRequest):
            suggest([], request(**overrides))

    @pytest.mark.parametrize("config", [ScoringConfig(limit=0), ScoringConfig(slot_step_minutes=0)])
    def test_invalid_config(self, config):
        with pytest.raises(InvalidRequest):
            suggest([], request(), config)


class TestGenerateSuggestions:
    """Tests for the raw-argument entry point."""

    def test_string_today(self, existing):
        result = generate_suggestions("P1", "consultation", 30, 3, existing, today="2024-01-15")
        assert result == suggest(existing, request())

    def test_malformed_today(self):
        with pytest.raises(InvalidRequest):
            generate_suggestions("P1", "consultation", 30, 3, [], today="Jan 15")

    def test_to_dict(self, existing):
        result = generate_suggestions("P1", "consultation", 30, 3, existing, today=MONDAY)
        assert result[0].to_dict() == {
            "date": "2024-01-15",
            "start_time": "09:00",
            "end_time": "09:30",
            "duration_minutes": 30,
            "score": 135,
            "rationale": "Early morning - less crowded; Available today",
        }


class TestSideEffects:
    """Tests that the generator stays a pure computation."""

    def test_writes_nothing(self, existing, capsys):
        """Test no output is printed when used as a library."""
        suggest(existing, request())
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
