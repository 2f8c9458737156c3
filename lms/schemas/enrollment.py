from datetime import datetime

from pydantic import BaseModel


class EnrollmentCreate(BaseModel):
    course_id: int


class SubjectSummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CatalogCourse(BaseModel):
    id: int
    name: str
    description: str | None = None

    class Config:
        from_attributes = True


class EnrolledCourse(CatalogCourse):
    subject: SubjectSummary


class EnrollmentResponse(BaseModel):
    course: EnrolledCourse
    enrolled_at: datetime | None = None


class EnrollmentCreated(BaseModel):
    message: str
    enrollment: EnrollmentResponse


class EnrollmentListResponse(BaseModel):
    enrollments: list[EnrollmentResponse]


class SubjectCatalog(SubjectSummary):
    description: str | None = None
    courses: list[CatalogCourse]


class SubjectListResponse(BaseModel):
    subjects: list[SubjectCatalog]


class CourseListResponse(BaseModel):
    courses: list[EnrolledCourse]
