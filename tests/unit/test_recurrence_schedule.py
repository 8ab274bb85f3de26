"""Unit tests for next-occurrence computation."""

from __future__ import annotations

from datetime import date

import pytest

from task_commander.exceptions import RecurrenceComputationError
from task_commander.models import Task
from task_commander.recurrence import next_instance, next_occurrence, upcoming_occurrences

TODAY = date(2026, 10, 17)  # Saturday
MONDAY = date(2026, 10, 19)


class TestIntervals:
    @pytest.mark.parametrize(
        ("pattern", "current_due", "expected"),
        [
            ("daily", date(2099, 1, 1), date(2099, 1, 2)),
            ("weekly", date(2099, 1, 1), date(2099, 1, 8)),
            ("monthly", date(2099, 1, 15), date(2099, 2, 15)),
            ("yearly", date(2099, 6, 15), date(2100, 6, 15)),
            ("every 2w", date(2099, 1, 1), date(2099, 1, 15)),
            ("every 3m", date(2099, 1, 1), date(2099, 4, 1)),
            ("every 10d", date(2099, 1, 1), date(2099, 1, 11)),
            ("every 2y", date(2099, 3, 1), date(2101, 3, 1)),
        ],
    )
    def test_future_due_advances_one_interval(
        self, pattern: str, current_due: date, expected: date
    ) -> None:
        assert next_occurrence(pattern, current_due, TODAY) == expected

    def test_always_advances_at_least_once(self) -> None:
        assert next_occurrence("daily", TODAY, TODAY) == date(2026, 10, 18)

    def test_stale_weekly_reaches_present(self) -> None:
        result = next_occurrence("weekly", date(2020, 1, 1), TODAY)
        assert result >= TODAY
        assert (result - date(2020, 1, 1)).days % 7 == 0
        assert (result - TODAY).days < 7

    def test_stale_daily_lands_on_today(self) -> None:
        assert next_occurrence("daily", date(2026, 10, 1), TODAY) == TODAY

    def test_stale_every_3d_keeps_phase(self) -> None:
        # 2026-10-01 + 6*3 days = 2026-10-19, the first step on or after today
        assert next_occurrence("every 3d", date(2026, 10, 1), TODAY) == date(2026, 10, 19)

    def test_month_end_clamps(self) -> None:
        assert next_occurrence("monthly", date(2099, 1, 31), TODAY) == date(2099, 2, 28)

    def test_month_end_does_not_drift(self) -> None:
        # Stale by two months: steps are measured from the original due date
        assert next_occurrence("monthly", date(2026, 7, 31), date(2026, 9, 1)) == date(2026, 9, 30)
        assert next_occurrence("monthly", date(2026, 7, 31), date(2026, 10, 1)) == date(2026, 10, 31)

    def test_leap_day_yearly(self) -> None:
        assert next_occurrence("yearly", date(2096, 2, 29), TODAY) == date(2097, 2, 28)

    def test_stale_monthly_reaches_present(self) -> None:
        assert next_occurrence("monthly", date(2025, 1, 17), TODAY) == TODAY

    def test_unnormalized_case_is_accepted(self) -> None:
        assert next_occurrence("Every 2D", date(2099, 1, 1), TODAY) == date(2099, 1, 3)


class TestWeekdays:
    def test_monday_to_wednesday_not_friday(self) -> None:
        assert next_occurrence("every wed,fri", MONDAY, TODAY) == date(2026, 10, 21)

    def test_list_order_does_not_matter(self) -> None:
        assert next_occurrence("every fri,wed", MONDAY, TODAY) == date(2026, 10, 21)

    def test_same_weekday_moves_a_full_week(self) -> None:
        assert next_occurrence("every monday", MONDAY, TODAY) == date(2026, 10, 26)

    def test_stale_due_starts_from_today(self) -> None:
        # Today is Saturday; a Saturday in the set matches today itself
        assert next_occurrence("every sat", date(2026, 9, 1), TODAY) == TODAY
        assert next_occurrence("every mon,thu", date(2026, 9, 1), TODAY) == MONDAY

    def test_full_names_and_abbreviations_mix(self) -> None:
        assert next_occurrence("every sunday,tue", MONDAY, TODAY) == date(2026, 10, 20)


class TestErrors:
    def test_unknown_weekday(self) -> None:
        with pytest.raises(RecurrenceComputationError) as exc_info:
            next_occurrence("every mon,funday", MONDAY, TODAY)
        assert exc_info.value.fragment == "funday"

    def test_unrecognized_shape(self) -> None:
        with pytest.raises(RecurrenceComputationError, match="unrecognized"):
            next_occurrence("biweekly", MONDAY, TODAY)

    def test_zero_interval(self) -> None:
        with pytest.raises(RecurrenceComputationError):
            next_occurrence("every 0d", MONDAY, TODAY)


class TestUpcoming:
    def test_chains_occurrences(self) -> None:
        assert upcoming_occurrences("every mon,thu", MONDAY, 3, TODAY) == [
            date(2026, 10, 22),
            date(2026, 10, 26),
            date(2026, 10, 29),
        ]


class TestNextInstance:
    def test_spawns_open_task_with_next_due(self) -> None:
        task = Task(
            index_id=4,
            title="Pay rent",
            status="done",
            due_date=date(2026, 10, 31),
            today_date=TODAY,
            recur="monthly",
            tags=("home",),
        )
        follow_up = next_instance(task, index_id=9, today=TODAY)
        assert follow_up is not None
        assert follow_up.index_id == 9
        assert follow_up.status == "open"
        assert follow_up.due_date == date(2026, 11, 30)
        assert follow_up.today_date is None
        assert follow_up.title == "Pay rent"
        assert follow_up.tags == ("home",)
        # Original untouched
        assert task.status == "done"
        assert task.due_date == date(2026, 10, 31)

    def test_non_recurring_returns_none(self) -> None:
        assert next_instance(Task(index_id=1, due_date=TODAY), index_id=2, today=TODAY) is None

    def test_recurring_without_due_returns_none(self) -> None:
        assert next_instance(Task(index_id=1, recur="daily"), index_id=2, today=TODAY) is None

    def test_bad_stored_pattern_raises(self) -> None:
        task = Task(index_id=1, recur="every someday", due_date=TODAY)
        with pytest.raises(RecurrenceComputationError):
            next_instance(task, index_id=2, today=TODAY)
