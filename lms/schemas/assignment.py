from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from lms.schemas.question import Question

AssignmentType = Literal[
    "multiple-choice", "true-false", "matching", "drag-and-drop",
    "writing", "writing-long", "speaking", "assignment", "listening",
]
DragAndDropSubtype = Literal["ordering", "categorization", "fill-blank", "labeling"]
Difficulty = Literal["beginner", "intermediate", "advanced"]


class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    type: AssignmentType
    subtype: DragAndDropSubtype | None = None
    difficulty: Difficulty | None = None
    points: int = Field(default=1, ge=1)
    questions: list[Question] = []
    due_date: datetime | None = None
    available_from: datetime | None = None
    available_to: datetime | None = None
    published: bool = True
    course_id: int
    unit_id: int | None = None

    @model_validator(mode="after")
    def _window_order(self):
        if self.available_from and self.available_to and self.available_from > self.available_to:
            raise ValueError("available_from must not be after available_to")
        return self

    @model_validator(mode="after")
    def _subtype_only_for_drag_and_drop(self):
        if self.subtype is not None and self.type != "drag-and-drop":
            raise ValueError("subtype is only allowed for drag-and-drop assignments")
        return self


class AssignmentUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    type: AssignmentType | None = None
    subtype: DragAndDropSubtype | None = None
    difficulty: Difficulty | None = None
    points: int | None = Field(default=None, ge=1)
    questions: list[Question] | None = None
    due_date: datetime | None = None
    available_from: datetime | None = None
    available_to: datetime | None = None
    published: bool | None = None
    course_id: int | None = None
    unit_id: int | None = None

    @model_validator(mode="after")
    def _required_fields_not_null(self):
        for name in ("title", "type", "points", "published", "course_id"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class AssignmentResourcesAttach(BaseModel):
    assignment_id: int
    resource_ids: list[int] = Field(min_length=1)


class CourseSummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class UnitSummary(BaseModel):
    id: int
    name: str
    order: int

    class Config:
        from_attributes = True


class AssignmentResourceSummary(BaseModel):
    id: int
    title: str
    description: str | None = None
    type: str
    file_size: int | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class AssignmentResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    type: str
    subtype: str | None = None
    difficulty: str | None = None
    points: int
    questions: list[dict] | None = None
    due_date: datetime | None = None
    available_from: datetime | None = None
    available_to: datetime | None = None
    published: bool
    course_id: int
    unit_id: int | None = None
    course: CourseSummary | None = None
    unit: UnitSummary | None = None
    resources: list[AssignmentResourceSummary] = []
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class AssignmentListResponse(BaseModel):
    assignments: list[AssignmentResponse]
