from datetime import date, datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from lms.api.deps import require_role
from lms.core.config import settings
from lms.core.errors import STUDENT_NOT_IN_ORGANIZATION, raise_with_code
from lms.core.rate_limit import limiter
from lms.db.database import get_db
from lms.domains.courses.services import CourseService
from lms.domains.progress.aggregation import class_stats, daily_averages, progress_summary
from lms.domains.progress.services import ProgressService
from lms.models.course import student_courses
from lms.models.user import User, UserRole
from lms.schemas.progress import (
    ClassProgressResponse,
    DailyProgressCreate,
    DailyProgressRecorded,
    StudentProgressResponse,
)

router = APIRouter(prefix="/progress", tags=["Progress"])

DAILY_AVERAGE_DAYS = 30


def _progress_rate_limit() -> str:
    # Evaluated by slowapi on every request
    return settings.progress_rate_limit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_student_or_403(db: Session, student_id: int, current_user: User) -> User:
    """Load a student and verify the current user may see their progress."""
    if current_user.has_role(UserRole.STUDENT):
        if current_user.id != student_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return current_user

    student = (
        db.query(User)
        .filter(User.id == student_id, User.role == UserRole.STUDENT)
        .first()
    )
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    # Teachers and admins only see students of their own school
    if student.organization_id != current_user.organization_id:
        raise_with_code(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student belongs to another organization",
            code=STUDENT_NOT_IN_ORGANIZATION,
        )
    return student


def _date_range(start_date: date | None, end_date: date | None) -> tuple[date | None, date | None]:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must not be after end_date",
        )
    return start_date, end_date


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/daily", response_model=DailyProgressRecorded)
@limiter.limit(_progress_rate_limit)
def record_daily_progress(
    request: Request,
    data: DailyProgressCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT)),
):
    """Record today's progress on an assignment and refresh the weekly rollup."""
    progress = ProgressService(db).record_daily(
        current_user,
        assignment_id=data.assignment_id,
        score=data.score,
        time_spent_minutes=data.time_spent_minutes,
        completed=data.completed,
        now=datetime.now(timezone.utc),
    )
    return {"message": "Progress recorded successfully", "progress": progress}


@router.get("/student/{student_id}", response_model=StudentProgressResponse)
def get_student_progress(
    student_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT, UserRole.TEACHER, UserRole.ADMIN)),
):
    """Daily rows, recent weekly rollups, learning patterns and summary stats."""
    student = _get_student_or_403(db, student_id, current_user)
    start, end = _date_range(start_date, end_date)

    service = ProgressService(db)
    rows = service.daily_rows([student.id], start, end)
    since = datetime.now(timezone.utc).date() - timedelta(days=DAILY_AVERAGE_DAYS)

    return {
        "daily_progress": rows,
        "weekly_progress": service.recent_weeks(student.id),
        "learning_patterns": service.learning_patterns(student.id),
        "summary": progress_summary(rows),
        "daily_averages": daily_averages(rows, since),
    }


@router.get("/class/{course_id}", response_model=ClassProgressResponse)
def get_class_progress(
    course_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER, UserRole.ADMIN)),
):
    """Progress of every student enrolled in a course."""
    course = CourseService(db).get_in_organization(course_id, current_user.organization_id)

    start, end = _date_range(start_date, end_date)
    students = (
        db.query(User)
        .join(student_courses, student_courses.c.student_id == User.id)
        .filter(student_courses.c.course_id == course.id)
        .order_by(User.full_name)
        .all()
    )
    rows = ProgressService(db).daily_rows([s.id for s in students], start, end)

    return {
        "class_progress": rows,
        "class_stats": class_stats(rows, total_students=len(students)),
        "students": students,
    }
