"""Enrollment domain service - students joining and leaving courses.

Enrollment rows are what the assignment resolver reads as a student's
enrolled courses, so every change here changes what the student can see.
"""

import logging

from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from lms.core.errors import ALREADY_ENROLLED, ENROLLMENT_NOT_FOUND, raise_with_code
from lms.domains.courses.services import CourseService
from lms.models.course import Course, Subject, student_courses
from lms.models.user import User

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for student enrollment."""

    def __init__(self, db: Session):
        self.db = db

    def subjects(self, student: User) -> list[Subject]:
        """Subjects of the student's organization with their courses, by name."""
        return (
            self.db.query(Subject)
            .options(selectinload(Subject.courses))
            .filter(Subject.organization_id == student.organization_id)
            .order_by(Subject.name, Subject.id)
            .all()
        )

    def courses_for_subject(self, student: User, subject_id: int) -> list[Course]:
        return (
            self.db.query(Course)
            .join(Subject, Subject.id == Course.subject_id)
            .filter(Course.subject_id == subject_id, Subject.organization_id == student.organization_id)
            .order_by(Course.name, Course.id)
            .all()
        )

    def enrollments(self, student: User) -> list[dict]:
        rows = (
            self.db.query(Course, student_courses.c.enrolled_at)
            .join(student_courses, student_courses.c.course_id == Course.id)
            .join(Subject, Subject.id == Course.subject_id)
            .filter(student_courses.c.student_id == student.id)
            .order_by(Subject.name, Course.name)
            .all()
        )
        return [{"course": course, "enrolled_at": enrolled_at} for course, enrolled_at in rows]

    def _enrolled_at(self, student_id: int, course_id: int):
        return (
            self.db.query(student_courses.c.enrolled_at)
            .filter(
                student_courses.c.student_id == student_id,
                student_courses.c.course_id == course_id,
            )
            .scalar()
        )

    def _is_enrolled(self, student_id: int, course_id: int) -> bool:
        return (
            self.db.query(student_courses)
            .filter(
                student_courses.c.student_id == student_id,
                student_courses.c.course_id == course_id,
            )
            .first()
        ) is not None

    def _already_enrolled(self):
        raise_with_code(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Already enrolled in this course",
            code=ALREADY_ENROLLED,
        )

    def enroll(self, student: User, course_id: int) -> dict:
        """Enroll the student in a course of their own organization.

        Raises:
            HTTPException 404 if the course is outside the student's organization.
            HTTPException 400 if the student is already enrolled.
        """
        course = CourseService(self.db).get_in_organization(course_id, student.organization_id)
        if self._is_enrolled(student.id, course.id):
            self._already_enrolled()

        try:
            self.db.execute(student_courses.insert().values(student_id=student.id, course_id=course.id))
            self.db.commit()
        except IntegrityError:
            # A concurrent request enrolled the same student first
            self.db.rollback()
            self._already_enrolled()

        logger.info(f"Student {student.id} enrolled in course {course.id}")
        return {"course": course, "enrolled_at": self._enrolled_at(student.id, course.id)}

    def unenroll(self, student: User, course_id: int) -> None:
        result = self.db.execute(
            student_courses.delete().where(
                student_courses.c.student_id == student.id,
                student_courses.c.course_id == course_id,
            )
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Enrollment not found",
                code=ENROLLMENT_NOT_FOUND,
            )
        self.db.commit()
        logger.info(f"Student {student.id} unenrolled from course {course_id}")
