from sqlalchemy import (
    Column, Integer, Float, String, Boolean, Date, DateTime, ForeignKey, JSON, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from lms.db.database import Base


class DailyProgress(Base):
    """One row per (student, assignment, day). Re-submissions bump ``attempts``."""

    __tablename__ = "daily_progress"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    score = Column(Integer, nullable=True)  # 0-100
    time_spent_minutes = Column(Integer, nullable=True)
    completed = Column(Boolean, default=False, nullable=False)
    attempts = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    student = relationship("User")
    assignment = relationship("Assignment")

    __table_args__ = (
        UniqueConstraint("student_id", "assignment_id", "date", name="uq_daily_progress_student_assignment_date"),
    )


class WeeklyProgress(Base):
    """Weekly rollup, recomputed whenever a DailyProgress row for that week is written."""

    __tablename__ = "weekly_progress"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    week_start = Column(Date, nullable=False)
    week_end = Column(Date, nullable=False)
    total_score = Column(Float, nullable=False, default=0)
    assignments_completed = Column(Integer, nullable=False, default=0)
    average_score = Column(Float, nullable=False, default=0)
    best_day_of_week = Column(String(10), nullable=True)
    worst_day_of_week = Column(String(10), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("student_id", "week_start", name="uq_weekly_progress_student_week"),
    )


class LearningPattern(Base):
    """Derived per-student signals keyed by ``pattern_type`` (e.g. "improvement_rate")."""

    __tablename__ = "learning_patterns"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    pattern_type = Column(String(50), nullable=False)
    pattern_data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("student_id", "pattern_type", name="uq_learning_patterns_student_type"),
    )
