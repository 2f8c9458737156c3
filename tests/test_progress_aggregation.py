"""Tests for weekly rollups, trends and progress summaries."""

from datetime import date

import pytest

from lms.domains.progress.aggregation import (
    best_and_worst_day,
    class_stats,
    daily_averages,
    improvement_trend,
    learning_pattern,
    progress_summary,
    week_bounds,
    weekly_rollup,
)
from lms.models.progress import DailyProgress

# 2024-09-01 is a Sunday
SUN = date(2024, 9, 1)
MON = date(2024, 9, 2)
TUE = date(2024, 9, 3)
WED = date(2024, 9, 4)
SAT = date(2024, 9, 7)


def _row(day, score, completed=False, assignment_id=1, student_id=7):
    return DailyProgress(
        student_id=student_id,
        assignment_id=assignment_id,
        date=day,
        score=score,
        completed=completed,
        attempts=1,
    )


# ── week_bounds ─────────────────────────────────────────────────

@pytest.mark.parametrize("day", [SUN, MON, WED, SAT])
def test_week_bounds_sunday_to_saturday(day):
    assert week_bounds(day) == (SUN, SAT)


def test_week_bounds_next_sunday_starts_new_week():
    assert week_bounds(date(2024, 9, 8)) == (date(2024, 9, 8), date(2024, 9, 14))


# ── weekly_rollup ───────────────────────────────────────────────

def test_empty_rollup():
    summary = weekly_rollup([], SUN, SAT)
    assert summary.student_id is None
    assert summary.total_score == 0
    assert summary.average_score == 0
    assert summary.scored_average == 0
    assert summary.assignments_completed == 0
    assert summary.best_day_of_week is None
    assert summary.worst_day_of_week is None
    assert summary.trend == "insufficient_data"


def test_two_day_improvement():
    rows = [_row(TUE, 90), _row(MON, 60)]
    summary = weekly_rollup(rows, SUN, SAT)

    assert summary.student_id == 7
    assert summary.improvement_rate == 30
    assert summary.trend == "improving"


def test_average_uses_row_count_but_scored_average_does_not():
    rows = [_row(MON, 80, completed=True), _row(TUE, None)]
    summary = weekly_rollup(rows, SUN, SAT)

    assert summary.total_score == 80
    assert summary.average_score == 40
    assert summary.scored_average == 80
    assert summary.assignments_completed == 1


def test_best_and_worst_days_ignore_unscored_weekdays():
    rows = [
        _row(MON, 90), _row(MON, 70, assignment_id=2),
        _row(TUE, 60),
        _row(WED, None),
    ]
    assert best_and_worst_day(rows) == ("Monday", "Tuesday")


def test_best_and_worst_when_nothing_scored():
    assert best_and_worst_day([_row(MON, None), _row(TUE, None)]) == (None, None)


def test_single_scored_day_is_both_best_and_worst():
    assert best_and_worst_day([_row(WED, 55)]) == ("Wednesday", "Wednesday")


# ── improvement_trend ───────────────────────────────────────────

def test_single_row_is_insufficient():
    assert improvement_trend([_row(MON, 100)]) == (0, "insufficient_data")


def test_odd_count_first_half_takes_extra_row():
    rows = [_row(MON, 50), _row(TUE, 70), _row(WED, 90)]
    rate, trend = improvement_trend(rows)
    # first half [50, 70] -> 60, second half [90]
    assert rate == 30
    assert trend == "improving"


def test_declining_and_stable():
    assert improvement_trend([_row(MON, 90), _row(TUE, 60)])[1] == "declining"
    assert improvement_trend([_row(MON, 80), _row(TUE, 80.4)])[1] == "stable"
    assert improvement_trend([_row(MON, 80), _row(TUE, 79.5)])[1] == "stable"


def test_missing_scores_count_as_zero_in_halves():
    rate, trend = improvement_trend([_row(MON, None), _row(TUE, 50)])
    assert rate == 50
    assert trend == "improving"


# ── learning_pattern ────────────────────────────────────────────

def test_consistency_is_100_for_identical_scores():
    pattern = learning_pattern([_row(MON, 80), _row(TUE, 80)])
    assert pattern.consistency_score == 100
    assert pattern.improvement_rate == 0
    assert pattern.trend == "stable"


def test_consistency_subtracts_standard_deviation():
    pattern = learning_pattern([_row(MON, 70), _row(TUE, 90), _row(WED, None)])
    assert pattern.consistency_score == pytest.approx(90)


def test_consistency_never_negative():
    rows = [_row(MON, 0), _row(TUE, 100)] * 3
    assert learning_pattern(rows).consistency_score >= 0


# ── summaries ───────────────────────────────────────────────────

def test_progress_summary_rounds_to_two_places():
    rows = [_row(MON, 1, completed=True), _row(TUE, 2), _row(WED, 2)]
    assert progress_summary(rows) == {
        "total_score": 5,
        "completed_assignments": 1,
        "average_score": 1.67,
        "total_assignments": 3,
    }


def test_progress_summary_empty():
    assert progress_summary([])["average_score"] == 0


def test_daily_averages_since_and_unscored_days():
    rows = [
        _row(SUN, 100),  # before cutoff
        _row(TUE, 80), _row(TUE, 60, assignment_id=2),
        _row(MON, None),
    ]
    assert daily_averages(rows, since=MON) == [
        {"date": "2024-09-02", "average_score": 0},
        {"date": "2024-09-03", "average_score": 70},
    ]


def test_class_stats():
    rows = [_row(MON, 90, completed=True), _row(TUE, 60), _row(WED, None)]
    assert class_stats(rows, total_students=2) == {
        "total_students": 2,
        "total_assignments": 3,
        "average_score": 50,
        "completion_rate": 33,
    }


def test_class_stats_empty():
    stats = class_stats([], total_students=4)
    assert stats["average_score"] == 0
    assert stats["completion_rate"] == 0
    assert stats["total_students"] == 4
