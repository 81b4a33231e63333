from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from openbook.api.schemas import (
    ActivityCreateRequest,
    ActivityResponse,
    ActivityListResponse,
    PaginatedActivityResponse
)
from openbook.auth.dependencies import get_current_user, get_current_user_optional, require_permission
from openbook.auth.policy import ensure_permission
from openbook.db.repositories import ActivityRepository
from openbook.models.user import User

router = APIRouter(prefix="/activities", tags=["activities"])


def _paginated(activities, page: int, limit: int, total: int) -> PaginatedActivityResponse:
    return PaginatedActivityResponse(
        activities=[activity.to_dict() for activity in activities],
        page=page,
        limit=limit,
        total=total,
        has_more=page * limit < total
    )


@router.get("/", response_model=PaginatedActivityResponse, response_model_by_alias=True)
async def list_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    user: Optional[User] = Depends(get_current_user_optional)
):
    """
    The caller's own activity feed.

    Guests see everyone's activities except administrative ones.
    """
    await ensure_permission(user, "view_activity")
    offset = (page - 1) * limit

    if user is not None:
        activities, total = await ActivityRepository.list_for_user(user.id, limit, offset)
    else:
        activities, total = await ActivityRepository.list_all(limit, offset, exclude_type="admin")
    return _paginated(activities, page, limit, total)


@router.get("/today", response_model=ActivityListResponse)
async def list_today_activities(user: User = Depends(get_current_user)):
    activities = await ActivityRepository.list_today_for_user(user.id)
    return ActivityListResponse(activities=[activity.to_dict() for activity in activities])


@router.get("/search", response_model=ActivityListResponse)
async def search_activities(
    q: str = Query(..., min_length=1),
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(get_current_user)
):
    activities = await ActivityRepository.search(user.id, q, limit)
    return ActivityListResponse(activities=[activity.to_dict() for activity in activities])


@router.post("/", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(request: ActivityCreateRequest, user: User = Depends(get_current_user)):
    activity = await ActivityRepository.create(
        user_id=user.id,
        type=request.type,
        title=request.title,
        description=request.description or "",
        icon=request.icon or "star",
        metadata=request.metadata
    )
    return ActivityResponse(activity=activity.to_dict())


@router.get("/admin/all", response_model=PaginatedActivityResponse, response_model_by_alias=True)
async def list_all_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    user: User = Depends(require_permission("view_activity_admin"))
):
    """Every user's activities, administrative entries included"""
    activities, total = await ActivityRepository.list_all(limit, (page - 1) * limit)
    return _paginated(activities, page, limit, total)
