"""Progress domain service - daily recording and weekly recomputation."""

import logging
from dataclasses import asdict
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.domains.assignments.services import AssignmentService
from lms.domains.progress.aggregation import learning_pattern, week_bounds, weekly_rollup
from lms.models.progress import DailyProgress, LearningPattern, WeeklyProgress
from lms.models.user import User

logger = logging.getLogger(__name__)

IMPROVEMENT_PATTERN = "improvement_rate"


class ProgressService:
    """Service for progress tracking."""

    def __init__(self, db: Session):
        self.db = db

    def record_daily(
        self,
        student: User,
        assignment_id: int,
        score: int | None,
        time_spent_minutes: int | None,
        completed: bool,
        now: datetime,
    ) -> DailyProgress:
        """Create or update today's row for (student, assignment).

        Re-recording on the same day keeps the earlier score and time when
        the new submission omits them, overwrites ``completed`` and bumps
        ``attempts``. The student's weekly rollup is recomputed afterwards.

        Raises:
            HTTPException 404 if the assignment is not visible to the student.
        """
        AssignmentService(self.db).get_visible(student, assignment_id, now)

        student_id = student.id
        today = now.date()
        try:
            progress = self._upsert_daily(student_id, assignment_id, today, score, time_spent_minutes, completed)
        except IntegrityError:
            # Another request inserted today's row between our lookup and insert
            self.db.rollback()
            logger.info(f"Daily progress for student {student_id}, assignment {assignment_id} raced; retrying")
            progress = self._upsert_daily(student_id, assignment_id, today, score, time_spent_minutes, completed)

        self.recalculate_week(student_id, today)
        self.db.commit()
        self.db.refresh(progress)
        return progress

    def _find_daily(self, student_id: int, assignment_id: int, day: date) -> DailyProgress | None:
        return (
            self.db.query(DailyProgress)
            .filter(
                DailyProgress.student_id == student_id,
                DailyProgress.assignment_id == assignment_id,
                DailyProgress.date == day,
            )
            .first()
        )

    def _upsert_daily(
        self,
        student_id: int,
        assignment_id: int,
        day: date,
        score: int | None,
        time_spent_minutes: int | None,
        completed: bool,
    ) -> DailyProgress:
        progress = self._find_daily(student_id, assignment_id, day)
        if progress:
            if score is not None:
                progress.score = score
            if time_spent_minutes is not None:
                progress.time_spent_minutes = time_spent_minutes
            progress.completed = completed
            progress.attempts = progress.attempts + 1
        else:
            progress = DailyProgress(
                student_id=student_id,
                assignment_id=assignment_id,
                date=day,
                score=score,
                time_spent_minutes=time_spent_minutes,
                completed=completed,
                attempts=1,
            )
            self.db.add(progress)

        self.db.flush()
        return progress

    def recalculate_week(self, student_id: int, day: date) -> WeeklyProgress | None:
        """Upsert the WeeklyProgress row (and learning pattern) for the week of ``day``."""
        week_start, week_end = week_bounds(day)
        rows = (
            self.db.query(DailyProgress)
            .filter(
                DailyProgress.student_id == student_id,
                DailyProgress.date >= week_start,
                DailyProgress.date <= week_end,
            )
            .all()
        )
        if not rows:
            return None

        summary = weekly_rollup(rows, week_start, week_end)
        weekly = (
            self.db.query(WeeklyProgress)
            .filter(WeeklyProgress.student_id == student_id, WeeklyProgress.week_start == week_start)
            .first()
        )
        if weekly is None:
            weekly = WeeklyProgress(student_id=student_id, week_start=week_start)
            self.db.add(weekly)

        weekly.week_end = week_end
        weekly.total_score = summary.total_score
        weekly.assignments_completed = summary.assignments_completed
        weekly.average_score = summary.average_score
        weekly.best_day_of_week = summary.best_day_of_week
        weekly.worst_day_of_week = summary.worst_day_of_week

        self._store_learning_pattern(student_id, rows)
        logger.info(
            f"Weekly progress for student {student_id} ({week_start}): "
            f"avg={summary.average_score:.2f} trend={summary.trend}"
        )
        return weekly

    def _store_learning_pattern(self, student_id: int, rows: list[DailyProgress]) -> None:
        data = asdict(learning_pattern(rows))
        pattern = (
            self.db.query(LearningPattern)
            .filter(
                LearningPattern.student_id == student_id,
                LearningPattern.pattern_type == IMPROVEMENT_PATTERN,
            )
            .first()
        )
        if pattern:
            pattern.pattern_data = data
        else:
            self.db.add(LearningPattern(
                student_id=student_id,
                pattern_type=IMPROVEMENT_PATTERN,
                pattern_data=data,
            ))

    def daily_rows(
        self,
        student_ids: list[int],
        start: date | None = None,
        end: date | None = None,
    ) -> list[DailyProgress]:
        """Daily rows for the given students, newest first, optionally date-bounded."""
        if not student_ids:
            return []
        query = self.db.query(DailyProgress).filter(DailyProgress.student_id.in_(student_ids))
        if start and end:
            query = query.filter(DailyProgress.date >= start, DailyProgress.date <= end)
        return query.order_by(DailyProgress.date.desc(), DailyProgress.id.desc()).all()

    def recent_weeks(self, student_id: int, limit: int = 12) -> list[WeeklyProgress]:
        return (
            self.db.query(WeeklyProgress)
            .filter(WeeklyProgress.student_id == student_id)
            .order_by(WeeklyProgress.week_start.desc())
            .limit(limit)
            .all()
        )

    def learning_patterns(self, student_id: int) -> list[LearningPattern]:
        return (
            self.db.query(LearningPattern)
            .filter(LearningPattern.student_id == student_id)
            .order_by(LearningPattern.created_at.desc())
            .all()
        )
