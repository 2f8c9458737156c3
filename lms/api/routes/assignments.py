from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.api.deps import require_role
from lms.db.database import get_db
from lms.domains.assignments.services import AssignmentService
from lms.models.user import User, UserRole
from lms.schemas.assignment import (
    AssignmentCreate,
    AssignmentListResponse,
    AssignmentResourcesAttach,
    AssignmentResponse,
    AssignmentUpdate,
)

router = APIRouter(prefix="/assignments", tags=["Assignments"])


@router.get("/", response_model=AssignmentListResponse)
def list_my_assignments(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT)),
):
    """Assignments the student can work on right now."""
    now = datetime.now(timezone.utc)
    return {"assignments": AssignmentService(db).visible_for_student(current_user, now)}


@router.get("/teacher", response_model=AssignmentListResponse)
def list_organization_assignments(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER, UserRole.ADMIN)),
):
    """All assignments of the organization, including drafts and closed windows."""
    return {"assignments": AssignmentService(db).list_for_organization(current_user.organization_id)}


@router.post("/resources", response_model=AssignmentResponse)
def attach_resources(
    data: AssignmentResourcesAttach,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER)),
):
    return AssignmentService(db).attach_resources(current_user, data)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT, UserRole.TEACHER, UserRole.ADMIN)),
):
    """Get one assignment.

    Students get 404 for hidden, unpublished or out-of-window assignments;
    staff see any assignment of their organization.
    """
    service = AssignmentService(db)
    if current_user.has_role(UserRole.STUDENT):
        return service.get_visible(current_user, assignment_id, datetime.now(timezone.utc))
    return service.get_for_organization(current_user.organization_id, assignment_id)


@router.post("/", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def create_assignment(
    data: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER)),
):
    """Create an assignment in a course of the teacher's organization."""
    return AssignmentService(db).create(current_user, data)


@router.patch("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: int,
    data: AssignmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER)),
):
    return AssignmentService(db).update(current_user, assignment_id, data)


@router.delete("/{assignment_id}")
def delete_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER)),
):
    AssignmentService(db).delete(current_user, assignment_id)
    return {"message": "Assignment deleted successfully"}


@router.delete("/{assignment_id}/resources/{resource_id}")
def detach_resource(
    assignment_id: int,
    resource_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER)),
):
    AssignmentService(db).detach_resource(current_user, assignment_id, resource_id)
    return {"message": "Resource removed from assignment"}
