from lms.models.organization import Organization
from lms.models.user import User, UserRole
from lms.models.course import Subject, Course, Unit, student_courses
from lms.models.resource import Resource
from lms.models.assignment import Assignment, assignment_resources
from lms.models.progress import DailyProgress, WeeklyProgress, LearningPattern

__all__ = [
    "Organization",
    "User",
    "UserRole",
    "Subject",
    "Course",
    "Unit",
    "student_courses",
    "Resource",
    "Assignment",
    "assignment_resources",
    "DailyProgress",
    "WeeklyProgress",
    "LearningPattern",
]
