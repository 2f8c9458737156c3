from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, Index, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from lms.db.database import Base


# Resources a teacher attached to an assignment
assignment_resources = Table(
    "assignment_resources",
    Base.metadata,
    Column("assignment_id", Integer, ForeignKey("assignments.id", ondelete="CASCADE"), primary_key=True),
    Column("resource_id", Integer, ForeignKey("resources.id", ondelete="CASCADE"), primary_key=True),
)


class Assignment(Base):
    """An assessment attached to a course (and optionally a unit).

    Students see it only while published, enrolled in its course, and
    inside the [available_from, available_to] window.
    """

    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(30), nullable=False)  # multiple-choice, writing, drag-and-drop, ...
    subtype = Column(String(30), nullable=True)
    difficulty = Column(String(20), nullable=True)
    points = Column(Integer, nullable=False, default=1)
    questions = Column(JSON, nullable=True)

    due_date = Column(DateTime(timezone=True), nullable=True)
    available_from = Column(DateTime(timezone=True), nullable=True)
    available_to = Column(DateTime(timezone=True), nullable=True)
    published = Column(Boolean, default=True, nullable=False)

    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True)
    created_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    course = relationship("Course")
    unit = relationship("Unit")
    resources = relationship(
        "Resource", secondary=assignment_resources, back_populates="assignments", order_by="Resource.id",
    )

    __table_args__ = (
        Index("ix_assignments_course_published", "course_id", "published"),
    )
