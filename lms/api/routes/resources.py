from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from lms.api.deps import require_role
from lms.db.database import get_db
from lms.domains.resources.grouping import ResourceGroup
from lms.domains.resources.services import ResourceService
from lms.models.user import User, UserRole
from lms.schemas.resource import (
    ResourceAllocate,
    ResourceDetailResponse,
    ResourceGroupResponse,
    ResourceListResponse,
    ResourceResponse,
    ResourceUpdate,
)

router = APIRouter(prefix="/resources", tags=["Resources"])


def _group_to_response(group: ResourceGroup) -> dict:
    return {
        "kind": "group",
        "id": group.id,
        "title": group.title,
        "description": group.description,
        "label": group.label,
        "total_size": group.total_size,
        "file_types": group.file_types,
        "resource_count": len(group.resources),
        "created_at": group.created_at,
        "resources": [ResourceResponse.model_validate(r) for r in group.resources],
    }


@router.get("/", response_model=ResourceListResponse)
def list_resources(
    course_id: int | None = None,
    unit_id: int | None = None,
    type: str | None = Query(None, description="AUDIO, VIDEO, PDF, IMAGE or OTHER"),
    q: str | None = Query(None, description="Title contains"),
    grouped: bool = True,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER, UserRole.ADMIN)),
):
    """List the organization's resources, bundled by label and upload time unless ``grouped=false``."""
    service = ResourceService(db)
    resources = service.list_for_organization(
        current_user.organization_id,
        course_id=course_id,
        unit_id=unit_id,
        resource_type=type,
        search=q,
    )

    if not grouped:
        items = [ResourceResponse.model_validate(r) for r in resources]
    else:
        items = [
            ResourceGroupResponse(**_group_to_response(item))
            if isinstance(item, ResourceGroup)
            else ResourceResponse.model_validate(item)
            for item in service.grouped(resources)
        ]

    return {"items": items, "total": len(resources)}


@router.post("/allocate", response_model=ResourceDetailResponse, status_code=status.HTTP_201_CREATED)
def allocate_resource(
    data: ResourceAllocate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER)),
):
    """Copy a shared resource template into one of the teacher's courses."""
    return ResourceService(db).allocate(current_user, data)


@router.get("/{resource_id}", response_model=ResourceDetailResponse)
def get_resource(
    resource_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER, UserRole.ADMIN)),
):
    return ResourceService(db).get_for_organization(current_user.organization_id, resource_id)


@router.patch("/{resource_id}", response_model=ResourceDetailResponse)
def update_resource(
    resource_id: int,
    data: ResourceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER)),
):
    """Update one of the teacher's own resources, including its bundle label."""
    return ResourceService(db).update(current_user, resource_id, data)


@router.delete("/{resource_id}")
def delete_resource(
    resource_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.TEACHER)),
):
    ResourceService(db).delete(current_user, resource_id)
    return {"message": "Resource deleted successfully"}
