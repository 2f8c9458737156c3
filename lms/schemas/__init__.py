from lms.schemas.resource import (
    ResourceResponse, ResourceDetailResponse, ResourceGroupResponse, ResourceListResponse,
    ResourceUpdate, ResourceAllocate,
)
from lms.schemas.assignment import (
    AssignmentCreate, AssignmentUpdate, AssignmentResourcesAttach,
    AssignmentResponse, AssignmentListResponse,
)
from lms.schemas.enrollment import (
    EnrollmentCreate, EnrollmentResponse, EnrollmentListResponse, SubjectListResponse,
)
from lms.schemas.progress import (
    DailyProgressCreate, DailyProgressResponse, WeeklyProgressResponse,
    StudentProgressResponse, ClassProgressResponse,
)

__all__ = [
    "ResourceResponse", "ResourceDetailResponse", "ResourceGroupResponse", "ResourceListResponse",
    "ResourceUpdate", "ResourceAllocate",
    "AssignmentCreate", "AssignmentUpdate", "AssignmentResourcesAttach",
    "AssignmentResponse", "AssignmentListResponse",
    "EnrollmentCreate", "EnrollmentResponse", "EnrollmentListResponse", "SubjectListResponse",
    "DailyProgressCreate", "DailyProgressResponse", "WeeklyProgressResponse",
    "StudentProgressResponse", "ClassProgressResponse",
]
