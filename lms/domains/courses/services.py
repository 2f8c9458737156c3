"""Course domain service - organization-scoped course and unit lookups."""

from fastapi import status
from sqlalchemy.orm import Session

from lms.core.errors import COURSE_NOT_IN_ORGANIZATION, UNIT_NOT_IN_ORGANIZATION, raise_with_code
from lms.models.course import Course, Subject, Unit


class CourseService:
    """Lookups that place assignments and resources inside an organization's catalog."""

    def __init__(self, db: Session):
        self.db = db

    def get_in_organization(self, course_id: int, organization_id: int) -> Course:
        """Return the course if its subject belongs to the organization, else 404."""
        course = (
            self.db.query(Course)
            .join(Subject, Subject.id == Course.subject_id)
            .filter(Course.id == course_id, Subject.organization_id == organization_id)
            .first()
        )
        if not course:
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Course not found or not accessible",
                code=COURSE_NOT_IN_ORGANIZATION,
            )
        return course

    def get_unit_in_course(self, unit_id: int, course_id: int | None) -> Unit:
        """Return the unit if it belongs to ``course_id``, else 404."""
        unit = None
        if course_id is not None:
            unit = (
                self.db.query(Unit)
                .filter(Unit.id == unit_id, Unit.course_id == course_id)
                .first()
            )
        if not unit:
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Unit not found or not accessible",
                code=UNIT_NOT_IN_ORGANIZATION,
            )
        return unit

    def check_placement(self, organization_id: int, course_id: int | None, unit_id: int | None) -> None:
        """Validate an optional course/unit pair against the organization."""
        if course_id is not None:
            self.get_in_organization(course_id, organization_id)
        if unit_id is not None:
            self.get_unit_in_course(unit_id, course_id)
