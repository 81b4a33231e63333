from fastapi import APIRouter, Depends, status
import logging

import aiosqlite

from openbook.api.errors import BadRequestError, NotFoundError, PermissionDeniedError
from openbook.api.schemas import TagRequest, TagResponse, TagListResponse, SuccessResponse
from openbook.auth.dependencies import get_current_user, require_permission
from openbook.db.repositories import ActivityRepository, TagRepository
from openbook.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tags", tags=["tags"])

DUPLICATE_TAG_MESSAGE = "A tag with this name already exists"


async def _log_tag_activity(user: User, title: str, description: str):
    await ActivityRepository.create(
        user_id=user.id,
        type="admin",
        title=title,
        description=description,
        icon="tag"
    )


@router.get("/public", response_model=TagListResponse)
async def list_tags_public(user: User = Depends(get_current_user)):
    """Tag list for any signed-in user"""
    tags = await TagRepository.list_all()
    return TagListResponse(tags=[tag.to_dict() for tag in tags])


@router.get("/", response_model=TagListResponse)
async def list_tags(user: User = Depends(require_permission("tag_management"))):
    tags = await TagRepository.list_all()
    return TagListResponse(tags=[tag.to_dict() for tag in tags])


@router.post("/", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(request: TagRequest, user: User = Depends(require_permission("tag_management"))):
    if await TagRepository.get_by_name(request.name):
        raise BadRequestError(DUPLICATE_TAG_MESSAGE)
    try:
        tag = await TagRepository.create(request.name, request.color)
    except aiosqlite.IntegrityError:
        raise BadRequestError(DUPLICATE_TAG_MESSAGE)

    await _log_tag_activity(user, "Tag created", f'Tag "{tag.name}" created by {user.username}')
    return TagResponse(message="Tag created successfully", tag=tag.to_dict())


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    request: TagRequest,
    user: User = Depends(require_permission("tag_management"))
):
    """Rename or recolour a tag; system tags keep their name"""
    existing = await TagRepository.get_by_id(tag_id)
    if not existing:
        raise NotFoundError("Tag not found")
    if existing.is_system and existing.name != request.name:
        raise PermissionDeniedError(f'The "{existing.name}" tag is a system tag and cannot be renamed')

    clash = await TagRepository.get_by_name(request.name)
    if clash and clash.id != tag_id:
        raise BadRequestError(DUPLICATE_TAG_MESSAGE)
    try:
        tag = await TagRepository.update(tag_id, request.name, request.color)
    except aiosqlite.IntegrityError:
        raise BadRequestError(DUPLICATE_TAG_MESSAGE)

    await _log_tag_activity(user, "Tag modified", f'Tag "{tag.name}" modified by {user.username}')
    return TagResponse(message="Tag updated successfully", tag=tag.to_dict())


@router.delete("/{tag_id}", response_model=SuccessResponse)
async def delete_tag(tag_id: int, user: User = Depends(require_permission("tag_management"))):
    existing = await TagRepository.get_by_id(tag_id)
    if not existing:
        raise NotFoundError("Tag not found")
    if existing.is_system:
        raise PermissionDeniedError(f'The "{existing.name}" tag is a system tag and cannot be deleted')

    await TagRepository.delete(tag_id)
    await _log_tag_activity(user, "Tag deleted", f'Tag "{existing.name}" deleted by {user.username}')
    return SuccessResponse(message="Tag deleted successfully")
