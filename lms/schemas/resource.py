import os
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from lms.schemas.assignment import CourseSummary, UnitSummary


class ResourceUpdate(BaseModel):
    """Partial update of a teacher's own resource. An empty ``label`` clears it."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    course_id: int | None = None
    unit_id: int | None = None
    label: str | None = Field(default=None, max_length=255)
    tags: list[str] | None = None


class ResourceAllocate(BaseModel):
    resource_id: int
    course_id: int
    unit_id: int | None = None


class ResourceResponse(BaseModel):
    kind: Literal["resource"] = "resource"
    id: int
    title: str
    description: str | None = None
    type: str
    file_path: str | None = None
    file_size: int | None = None
    mime_type: str | None = None
    label: str | None = None
    tags: list[str] | None = None
    is_shared: bool = False
    template_id: int | None = None
    course_id: int | None = None
    unit_id: int | None = None
    created_by_user_id: int
    created_at: datetime

    @field_validator("file_path")
    @classmethod
    def _public_path(cls, value: str | None) -> str | None:
        # Never expose the server-side upload directory
        return f"/uploads/{os.path.basename(value)}" if value else None

    class Config:
        from_attributes = True


class ResourceDetailResponse(ResourceResponse):
    course: CourseSummary | None = None
    unit: UnitSummary | None = None


class ResourceGroupResponse(BaseModel):
    kind: Literal["group"] = "group"
    id: str
    title: str
    description: str
    label: str | None = None
    total_size: int
    file_types: list[str]
    resource_count: int
    created_at: datetime | None = None
    resources: list[ResourceResponse]


ResourceListItem = Annotated[
    Union[ResourceResponse, ResourceGroupResponse],
    Field(discriminator="kind"),
]


class ResourceListResponse(BaseModel):
    items: list[ResourceListItem]
    total: int  # number of underlying resources, not list entries
