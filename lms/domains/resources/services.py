"""Resource domain service - organization-scoped listing, bundling and upkeep."""

import logging
from datetime import timedelta

from fastapi import status
from sqlalchemy.orm import Session

from lms.core.config import settings
from lms.core.errors import RESOURCE_NOT_FOUND, SHARED_RESOURCE_NOT_FOUND, raise_with_code
from lms.core.utils import escape_like
from lms.domains.courses.services import CourseService
from lms.domains.resources.grouping import ResourceGroup, group_resources
from lms.models.resource import Resource
from lms.models.user import User
from lms.schemas.resource import ResourceAllocate, ResourceUpdate

logger = logging.getLogger(__name__)


def resource_type_for_mime(mime_type: str | None) -> str:
    """Map an upload MIME type to the coarse resource type shown in the UI."""
    if not mime_type:
        return "OTHER"
    if mime_type.startswith("audio/"):
        return "AUDIO"
    if mime_type.startswith("video/"):
        return "VIDEO"
    if mime_type == "application/pdf":
        return "PDF"
    if mime_type.startswith("image/"):
        return "IMAGE"
    return "OTHER"


class ResourceService:
    """Service for resource listing and teacher-owned changes."""

    def __init__(self, db: Session):
        self.db = db

    def list_for_organization(
        self,
        organization_id: int,
        course_id: int | None = None,
        unit_id: int | None = None,
        resource_type: str | None = None,
        search: str | None = None,
    ) -> list[Resource]:
        """Resources uploaded by anyone in the organization, newest first."""
        query = self._organization_query(organization_id)
        if course_id:
            query = query.filter(Resource.course_id == course_id)
        if unit_id:
            query = query.filter(Resource.unit_id == unit_id)
        if resource_type:
            # Accept either a coarse type ("pdf") or a MIME type ("application/pdf")
            if "/" in resource_type:
                resource_type = resource_type_for_mime(resource_type)
            query = query.filter(Resource.type == resource_type.upper())
        if search:
            query = query.filter(Resource.title.ilike(f"%{escape_like(search)}%", escape="\\"))

        return query.order_by(Resource.created_at.desc(), Resource.id.desc()).all()

    def grouped(self, resources: list[Resource]) -> list[Resource | ResourceGroup]:
        window = timedelta(seconds=settings.resource_group_window_seconds)
        items = group_resources(resources, window=window)
        logger.debug(f"Grouped {len(resources)} resources into {len(items)} entries")
        return items

    def _organization_query(self, organization_id: int):
        return (
            self.db.query(Resource)
            .join(User, User.id == Resource.created_by_user_id)
            .filter(User.organization_id == organization_id)
        )

    def get_for_organization(self, organization_id: int, resource_id: int) -> Resource:
        resource = self._organization_query(organization_id).filter(Resource.id == resource_id).first()
        if not resource:
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Resource not found",
                code=RESOURCE_NOT_FOUND,
            )
        return resource

    def _get_own(self, teacher: User, resource_id: int) -> Resource:
        """Teachers may only change or delete resources they uploaded."""
        resource = (
            self._organization_query(teacher.organization_id)
            .filter(Resource.id == resource_id, Resource.created_by_user_id == teacher.id)
            .first()
        )
        if not resource:
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Resource not found",
                code=RESOURCE_NOT_FOUND,
            )
        return resource

    def update(self, teacher: User, resource_id: int, data: ResourceUpdate) -> Resource:
        """Apply a partial update. Setting ``label`` moves the resource into that bundle."""
        resource = self._get_own(teacher, resource_id)
        fields = data.model_dump(exclude_unset=True)

        if fields.get("title") is None:
            fields.pop("title", None)
        if "label" in fields:
            fields["label"] = (fields["label"] or "").strip() or None

        if "course_id" in fields or "unit_id" in fields:
            course_id = fields.get("course_id", resource.course_id)
            unit_id = fields.get("unit_id", resource.unit_id)
            CourseService(self.db).check_placement(teacher.organization_id, course_id, unit_id)

        for key, value in fields.items():
            setattr(resource, key, value)

        self.db.commit()
        self.db.refresh(resource)
        logger.info(f"Resource {resource.id} updated by user {teacher.id}: {sorted(fields)}")
        return resource

    def allocate(self, teacher: User, data: ResourceAllocate) -> Resource:
        """Copy a shared template into one of the teacher's courses.

        The copy points at the template's file; it is owned by the teacher
        and is not itself shared.
        """
        template = (
            self.db.query(Resource)
            .filter(Resource.id == data.resource_id, Resource.is_shared.is_(True))
            .first()
        )
        if not template:
            raise_with_code(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Shared resource template not found",
                code=SHARED_RESOURCE_NOT_FOUND,
            )
        CourseService(self.db).check_placement(teacher.organization_id, data.course_id, data.unit_id)

        copy = Resource(
            title=template.title,
            description=template.description,
            type=template.type,
            file_path=template.file_path,
            file_size=template.file_size,
            mime_type=template.mime_type,
            label=template.label,
            tags=list(template.tags) if template.tags else template.tags,
            is_shared=False,
            template_id=template.id,
            course_id=data.course_id,
            unit_id=data.unit_id,
            created_by_user_id=teacher.id,
        )
        self.db.add(copy)
        self.db.commit()
        self.db.refresh(copy)
        logger.info(f"Resource template {template.id} allocated to course {data.course_id} as {copy.id}")
        return copy

    def delete(self, teacher: User, resource_id: int) -> None:
        resource = self._get_own(teacher, resource_id)
        self.db.delete(resource)
        self.db.commit()
        logger.info(f"Resource {resource_id} deleted by user {teacher.id}")
