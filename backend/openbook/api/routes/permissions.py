from fastapi import APIRouter, Depends, status
import logging

import aiosqlite

from openbook.api.errors import BadRequestError, NotFoundError
from openbook.api.schemas import (
    PermissionRequest,
    TagPermissionsRequest,
    PermissionResponse,
    PermissionListResponse,
    PermissionsByCategoryResponse,
    TagResponse,
    TagListResponse,
    SuccessResponse
)
from openbook.auth.dependencies import get_current_user, require_permission
from openbook.db.repositories import ActivityRepository, PermissionRepository, TagRepository
from openbook.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/permissions", tags=["permissions"])

DUPLICATE_PERMISSION_MESSAGE = "Permission with this name already exists"


@router.get("/", response_model=PermissionListResponse)
async def list_permissions(user: User = Depends(get_current_user)):
    """Permission catalogue with the number of tags granting each"""
    permissions = await PermissionRepository.list_all()
    return PermissionListResponse(permissions=[p.to_dict() for p in permissions])


@router.get("/by-category", response_model=PermissionsByCategoryResponse)
async def list_permissions_by_category(user: User = Depends(get_current_user)):
    categories = {}
    for permission in await PermissionRepository.list_all():
        categories.setdefault(permission.category, []).append(permission.to_dict())
    return PermissionsByCategoryResponse(categories=categories)


@router.get("/tags", response_model=TagListResponse)
async def list_tag_permissions(user: User = Depends(get_current_user)):
    """Every tag with the permissions it grants"""
    tags = await TagRepository.list_with_permissions()
    return TagListResponse(tags=[tag.to_dict() for tag in tags])


@router.get("/tags/{tag_id}", response_model=TagResponse)
async def get_tag_permissions(tag_id: int, user: User = Depends(get_current_user)):
    tag = await TagRepository.get_by_id(tag_id)
    if not tag:
        raise NotFoundError("Tag not found")
    tag.permissions = [p.to_dict() for p in await TagRepository.get_permissions_for_tag(tag_id)]
    return TagResponse(tag=tag.to_dict())


@router.put("/tags/{tag_id}", response_model=TagResponse)
async def update_tag_permissions(
    tag_id: int,
    request: TagPermissionsRequest,
    user: User = Depends(require_permission("permission_management"))
):
    """Replace the permissions granted by a tag"""
    tag = await TagRepository.get_by_id(tag_id)
    if not tag:
        raise NotFoundError("Tag not found")

    requested = set(request.permission_ids)
    unknown = requested - await PermissionRepository.get_existing_ids(list(requested))
    if unknown:
        raise BadRequestError(f"Unknown permission id(s): {', '.join(str(i) for i in sorted(unknown))}")

    await TagRepository.replace_permissions(tag_id, request.permission_ids)
    await ActivityRepository.create(
        user_id=user.id,
        type="admin",
        title="Tag permissions updated",
        description=f'Permissions of tag "{tag.name}" updated by {user.username}',
        icon="key",
        metadata={"tagId": tag_id, "permissionIds": sorted(requested)}
    )

    tag.permissions = [p.to_dict() for p in await TagRepository.get_permissions_for_tag(tag_id)]
    return TagResponse(message="Tag permissions updated successfully", tag=tag.to_dict())


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(permission_id: int, user: User = Depends(get_current_user)):
    permission = await PermissionRepository.get_by_id(permission_id)
    if not permission:
        raise NotFoundError("Permission not found")
    return PermissionResponse(permission=permission.to_dict())


@router.post("/", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
async def create_permission(
    request: PermissionRequest,
    user: User = Depends(require_permission("permission_management"))
):
    if await PermissionRepository.get_by_name(request.name):
        raise BadRequestError(DUPLICATE_PERMISSION_MESSAGE)
    try:
        permission = await PermissionRepository.create(request.name, request.description, request.category)
    except aiosqlite.IntegrityError:
        raise BadRequestError(DUPLICATE_PERMISSION_MESSAGE)

    logger.info(f"Permission '{permission.name}' created by {user.username}")
    return PermissionResponse(message="Permission created successfully", permission=permission.to_dict())


@router.put("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: int,
    request: PermissionRequest,
    user: User = Depends(require_permission("permission_management"))
):
    if not await PermissionRepository.get_by_id(permission_id):
        raise NotFoundError("Permission not found")
    if await PermissionRepository.get_by_name_excluding_id(request.name, permission_id):
        raise BadRequestError(DUPLICATE_PERMISSION_MESSAGE)
    try:
        permission = await PermissionRepository.update(
            permission_id, request.name, request.description, request.category
        )
    except aiosqlite.IntegrityError:
        raise BadRequestError(DUPLICATE_PERMISSION_MESSAGE)

    return PermissionResponse(message="Permission updated successfully", permission=permission.to_dict())


@router.delete("/{permission_id}", response_model=SuccessResponse)
async def delete_permission(
    permission_id: int,
    user: User = Depends(require_permission("permission_management"))
):
    existing = await PermissionRepository.get_by_id(permission_id)
    if not existing:
        raise NotFoundError("Permission not found")

    await PermissionRepository.delete(permission_id)
    logger.info(f"Permission '{existing.name}' deleted by {user.username}")
    return SuccessResponse(message="Permission deleted successfully", data=existing.to_dict())
