"""Progress rollups over DailyProgress rows.

All functions take already-fetched rows (anything with ``student_id``,
``date``, ``score``, ``completed``) and never raise on empty input; every
ratio falls back to 0 instead of dividing by zero.

Two averages coexist on purpose:

- ``average_score`` divides the score total by the number of rows, so rows
  without a score pull the average down (missing score counts as 0).
- ``scored_average`` and the per-weekday averages only count rows that have
  a score.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

IMPROVING_THRESHOLD = 0.5


@dataclass(frozen=True)
class WeeklyProgressSummary:
    student_id: int | None
    week_start: date
    week_end: date
    total_score: float
    assignments_completed: int
    average_score: float
    scored_average: float
    best_day_of_week: str | None
    worst_day_of_week: str | None
    improvement_rate: float
    trend: str


@dataclass(frozen=True)
class LearningPatternSummary:
    improvement_rate: float
    consistency_score: float
    trend: str


def _score(row) -> float:
    return row.score if row.score is not None else 0


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0


def week_bounds(day: date) -> tuple[date, date]:
    """Return (Sunday, Saturday) of the week containing ``day``."""
    # date.weekday(): Monday=0 .. Sunday=6
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def improvement_trend(rows: Sequence) -> tuple[float, str]:
    """Compare the later half of the rows with the earlier half.

    Rows are ordered by date; the first half takes the extra row when the
    count is odd. Returns ``(improvement_rate, trend)``.
    """
    if len(rows) < 2:
        return 0, "insufficient_data"

    ordered = sorted(rows, key=lambda r: r.date)
    cut = math.ceil(len(ordered) / 2)
    first_avg = _mean([_score(r) for r in ordered[:cut]])
    second_avg = _mean([_score(r) for r in ordered[cut:]])
    rate = second_avg - first_avg

    if rate > IMPROVING_THRESHOLD:
        return rate, "improving"
    if rate < -IMPROVING_THRESHOLD:
        return rate, "declining"
    return rate, "stable"


def best_and_worst_day(rows: Sequence) -> tuple[str | None, str | None]:
    """Weekday names with the highest and lowest average of scored rows."""
    buckets: dict[str, list[float]] = {}
    for row in rows:
        if row.score is None:
            continue
        buckets.setdefault(WEEKDAY_NAMES[row.date.weekday()], []).append(row.score)

    best = worst = None
    best_avg = worst_avg = None
    for day_name, scores in buckets.items():
        avg = _mean(scores)
        if best_avg is None or avg > best_avg:
            best, best_avg = day_name, avg
        if worst_avg is None or avg < worst_avg:
            worst, worst_avg = day_name, avg
    return best, worst


def weekly_rollup(rows: Sequence, week_start: date, week_end: date) -> WeeklyProgressSummary:
    total = sum(_score(r) for r in rows)
    scored = [r.score for r in rows if r.score is not None]
    best, worst = best_and_worst_day(rows)
    rate, trend = improvement_trend(rows)

    return WeeklyProgressSummary(
        student_id=rows[0].student_id if rows else None,
        week_start=week_start,
        week_end=week_end,
        total_score=total,
        assignments_completed=sum(1 for r in rows if r.completed),
        average_score=total / len(rows) if rows else 0,
        scored_average=_mean(scored),
        best_day_of_week=best,
        worst_day_of_week=worst,
        improvement_rate=rate,
        trend=trend,
    )


def learning_pattern(rows: Sequence) -> LearningPatternSummary:
    """Improvement rate plus a 0-100 consistency score (100 minus score stddev)."""
    rate, trend = improvement_trend(rows)
    scores = [r.score for r in rows if r.score is not None]
    mean = _mean(scores)
    variance = _mean([(s - mean) ** 2 for s in scores])
    return LearningPatternSummary(
        improvement_rate=rate,
        consistency_score=max(0.0, 100 - math.sqrt(variance)),
        trend=trend,
    )


def progress_summary(rows: Sequence) -> dict:
    total = sum(_score(r) for r in rows)
    average = total / len(rows) if rows else 0
    return {
        "total_score": total,
        "completed_assignments": sum(1 for r in rows if r.completed),
        "average_score": round(average, 2),
        "total_assignments": len(rows),
    }


def daily_averages(rows: Sequence, since: date) -> list[dict]:
    """Average scored value per calendar day on or after ``since``, oldest first."""
    per_day: dict[date, list[float]] = {}
    for row in rows:
        if row.date < since:
            continue
        scores = per_day.setdefault(row.date, [])
        if row.score is not None:
            scores.append(row.score)

    return [
        {"date": day.isoformat(), "average_score": _mean(scores)}
        for day, scores in sorted(per_day.items())
    ]


def class_stats(rows: Sequence, total_students: int) -> dict:
    stats = {
        "total_students": total_students,
        "total_assignments": len(rows),
        "average_score": 0,
        "completion_rate": 0,
    }
    if rows:
        total = sum(_score(r) for r in rows)
        completed = sum(1 for r in rows if r.completed)
        stats["average_score"] = round(total / len(rows), 2)
        stats["completion_rate"] = round(completed / len(rows) * 100)
    return stats
