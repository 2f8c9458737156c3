"""Assignment domain service - student visibility and teacher authoring."""

import logging
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload, selectinload

from lms.core.errors import (
    ASSIGNMENT_NOT_FOUND,
    ASSIGNMENT_NOT_VISIBLE,
    RESOURCE_NOT_FOUND,
    RESOURCE_NOT_IN_ORGANIZATION,
    raise_with_code,
)
from lms.core.utils import as_utc
from lms.domains.assignments.visibility import sort_assignments, visible_assignments
from lms.domains.courses.services import CourseService
from lms.models.assignment import Assignment
from lms.models.course import Course, Subject, student_courses
from lms.models.resource import Resource
from lms.models.user import User
from lms.schemas.assignment import AssignmentCreate, AssignmentResourcesAttach, AssignmentUpdate

logger = logging.getLogger(__name__)


def _check_subtype(assignment_type: str, subtype: str | None) -> None:
    if assignment_type == "drag-and-drop" and subtype is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Drag-and-drop assignments need a subtype",
        )
    if assignment_type != "drag-and-drop" and subtype is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="subtype is only allowed for drag-and-drop assignments",
        )


class AssignmentService:
    """Service for assignment-related business logic."""

    def __init__(self, db: Session):
        self.db = db

    def enrolled_course_ids(self, student: User) -> set[int]:
        rows = (
            self.db.query(student_courses.c.course_id)
            .filter(student_courses.c.student_id == student.id)
            .all()
        )
        return {r[0] for r in rows}

    def _with_relations(self, query):
        return query.options(
            joinedload(Assignment.course).joinedload(Course.subject),
            joinedload(Assignment.unit),
            selectinload(Assignment.resources),
        )

    def _catalog(self, course_ids: set[int]):
        return self._with_relations(self.db.query(Assignment)).filter(Assignment.course_id.in_(course_ids))

    def _organization_catalog(self, organization_id: int):
        return (
            self._with_relations(self.db.query(Assignment))
            .join(Course, Course.id == Assignment.course_id)
            .join(Subject, Subject.id == Course.subject_id)
            .filter(Subject.organization_id == organization_id)
        )

    # ── Student side ────────────────────────────────────────────

    def visible_for_student(self, student: User, now: datetime) -> list[Assignment]:
        """Published, in-window assignments of the student's enrolled courses."""
        course_ids = self.enrolled_course_ids(student)
        if not course_ids:
            return []

        catalog = self._catalog(course_ids).all()
        visible = visible_assignments(catalog, course_ids, student.organization_id, now)
        logger.debug(
            f"Student {student.id}: {len(visible)} of {len(catalog)} assignments visible"
        )
        return visible

    def get_visible(self, student: User, assignment_id: int, now: datetime) -> Assignment:
        """Return the assignment if the student can currently see it, else 404."""
        course_ids = self.enrolled_course_ids(student)
        candidates = self._catalog(course_ids).filter(Assignment.id == assignment_id).all() if course_ids else []
        visible = visible_assignments(candidates, course_ids, student.organization_id, now)
        if not visible:
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Assignment not found",
                code=ASSIGNMENT_NOT_VISIBLE,
            )
        return visible[0]

    # ── Teacher side ────────────────────────────────────────────

    def list_for_organization(self, organization_id: int) -> list[Assignment]:
        """Every assignment in the organization's courses, drafts and closed ones included."""
        return sort_assignments(self._organization_catalog(organization_id).all())

    def get_for_organization(self, organization_id: int, assignment_id: int) -> Assignment:
        assignment = (
            self._organization_catalog(organization_id)
            .filter(Assignment.id == assignment_id)
            .first()
        )
        if not assignment:
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Assignment not found or not accessible",
                code=ASSIGNMENT_NOT_FOUND,
            )
        return assignment

    def create(self, teacher: User, data: AssignmentCreate) -> Assignment:
        """Create an assignment in one of the teacher's organization's courses."""
        courses = CourseService(self.db)
        course = courses.get_in_organization(data.course_id, teacher.organization_id)
        if data.unit_id is not None:
            courses.get_unit_in_course(data.unit_id, course.id)
        _check_subtype(data.type, data.subtype)

        payload = data.model_dump(exclude={"questions"})
        assignment = Assignment(
            **payload,
            questions=[q.model_dump(mode="json") for q in data.questions],
            created_by_user_id=teacher.id,
        )
        self.db.add(assignment)
        self.db.commit()
        self.db.refresh(assignment)
        logger.info(f"Assignment {assignment.id} created in course {course.id} by user {teacher.id}")
        return assignment

    def update(self, teacher: User, assignment_id: int, data: AssignmentUpdate) -> Assignment:
        """Apply a partial update, re-checking placement, window and subtype on the merged row."""
        assignment = self.get_for_organization(teacher.organization_id, assignment_id)
        fields = data.model_dump(exclude_unset=True, exclude={"questions"})
        if "questions" in data.model_fields_set:
            fields["questions"] = [q.model_dump(mode="json") for q in data.questions or []]

        if "course_id" in fields or "unit_id" in fields:
            course_id = fields.get("course_id", assignment.course_id)
            unit_id = fields.get("unit_id", assignment.unit_id)
            CourseService(self.db).check_placement(teacher.organization_id, course_id, unit_id)

        available_from = fields.get("available_from", assignment.available_from)
        available_to = fields.get("available_to", assignment.available_to)
        if available_from and available_to and as_utc(available_from) > as_utc(available_to):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="available_from must not be after available_to",
            )
        _check_subtype(fields.get("type", assignment.type), fields.get("subtype", assignment.subtype))

        for key, value in fields.items():
            setattr(assignment, key, value)

        self.db.commit()
        logger.info(f"Assignment {assignment_id} updated by user {teacher.id}: {sorted(fields)}")
        return self.get_for_organization(teacher.organization_id, assignment_id)

    def delete(self, teacher: User, assignment_id: int) -> None:
        assignment = self.get_for_organization(teacher.organization_id, assignment_id)
        self.db.delete(assignment)
        self.db.commit()
        logger.info(f"Assignment {assignment_id} deleted by user {teacher.id}")

    def attach_resources(self, teacher: User, data: AssignmentResourcesAttach) -> Assignment:
        """Attach organization resources to an assignment. Already-attached ones are skipped."""
        assignment = self.get_for_organization(teacher.organization_id, data.assignment_id)
        wanted = set(data.resource_ids)
        resources = (
            self.db.query(Resource)
            .join(User, User.id == Resource.created_by_user_id)
            .filter(Resource.id.in_(wanted), User.organization_id == teacher.organization_id)
            .all()
        )
        if len(resources) != len(wanted):
            raise_with_code(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Some resources not found or not accessible",
                code=RESOURCE_NOT_IN_ORGANIZATION,
            )

        attached = {r.id for r in assignment.resources}
        for resource in resources:
            if resource.id not in attached:
                assignment.resources.append(resource)

        self.db.commit()
        logger.info(f"Resources {sorted(wanted)} attached to assignment {assignment.id}")
        return self.get_for_organization(teacher.organization_id, data.assignment_id)

    def detach_resource(self, teacher: User, assignment_id: int, resource_id: int) -> None:
        assignment = self.get_for_organization(teacher.organization_id, assignment_id)
        resource = next((r for r in assignment.resources if r.id == resource_id), None)
        if resource is None:
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Resource is not attached to this assignment",
                code=RESOURCE_NOT_FOUND,
            )
        assignment.resources.remove(resource)
        self.db.commit()
