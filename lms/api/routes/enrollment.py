from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.api.deps import require_role
from lms.db.database import get_db
from lms.domains.enrollment.services import EnrollmentService
from lms.models.user import User, UserRole
from lms.schemas.enrollment import (
    CourseListResponse,
    EnrollmentCreate,
    EnrollmentCreated,
    EnrollmentListResponse,
    SubjectListResponse,
)

router = APIRouter(prefix="/enrollment", tags=["Enrollment"])


@router.get("/subjects", response_model=SubjectListResponse)
def list_subjects(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT)),
):
    """Subjects and courses the student can enroll in."""
    return {"subjects": EnrollmentService(db).subjects(current_user)}


@router.get("/courses/{subject_id}", response_model=CourseListResponse)
def list_subject_courses(
    subject_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT)),
):
    return {"courses": EnrollmentService(db).courses_for_subject(current_user, subject_id)}


@router.get("/my-courses", response_model=EnrollmentListResponse)
def list_my_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT)),
):
    return {"enrollments": EnrollmentService(db).enrollments(current_user)}


@router.post("/enroll", response_model=EnrollmentCreated, status_code=status.HTTP_201_CREATED)
def enroll(
    data: EnrollmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT)),
):
    """Enroll in a course; its published assignments become visible."""
    enrollment = EnrollmentService(db).enroll(current_user, data.course_id)
    return {"message": "Successfully enrolled in course", "enrollment": enrollment}


@router.delete("/unenroll/{course_id}")
def unenroll(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT)),
):
    EnrollmentService(db).unenroll(current_user, course_id)
    return {"message": "Successfully unenrolled from course"}
