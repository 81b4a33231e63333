from fastapi import APIRouter, Depends, Query, status
import logging

from openbook.api.errors import BadRequestError, NotFoundError, PageNotFoundError, PermissionDeniedError
from openbook.api.schemas import (
    CommentCreateRequest,
    CommentUpdateRequest,
    CommentResponse,
    CommentListResponse,
    SuccessResponse
)
from openbook.auth.dependencies import get_current_user
from openbook.auth.policy import ensure_owner_or_admin
from openbook.db.repositories import ActivityRepository, CommentRepository, WikiPageRepository
from openbook.models.comment import Comment, build_comment_tree
from openbook.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])


async def _get_comment(comment_id: int) -> Comment:
    comment = await CommentRepository.get_by_id(comment_id)
    if not comment:
        raise NotFoundError("Comment not found")
    return comment


@router.get("/{page_id}", response_model=CommentListResponse)
async def get_page_comments(page_id: int, threaded: bool = Query(False)):
    """Comments on a page, oldest first; threaded=true nests replies"""
    page = await WikiPageRepository.get_by_id(page_id)
    if not page:
        raise PageNotFoundError()

    comments = await CommentRepository.list_for_page(page_id)
    if threaded:
        payload = [comment.to_dict(include_replies=True) for comment in build_comment_tree(comments)]
    else:
        payload = [comment.to_dict() for comment in comments]
    return CommentListResponse(comments=payload, total=len(comments))


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(request: CommentCreateRequest, user: User = Depends(get_current_user)):
    page = await WikiPageRepository.get_by_id(request.page_id)
    if not page:
        raise PageNotFoundError()
    if not page.comments_enabled:
        raise PermissionDeniedError("Comments are disabled for this page")

    if request.parent_id is not None:
        parent = await CommentRepository.get_by_id(request.parent_id)
        if not parent or parent.page_id != page.id:
            raise BadRequestError("Parent comment not found on this page")

    comment = await CommentRepository.create(
        page_id=page.id,
        user_id=user.id,
        content=request.content,
        parent_id=request.parent_id
    )
    await ActivityRepository.create(
        user_id=user.id,
        type="comment",
        title="Comment added",
        description=f"Commented on page '{page.title}'",
        icon="message-square",
        metadata={"pageId": page.id, "pageTitle": page.title, "commentId": comment.id}
    )
    return CommentResponse(message="Comment added successfully", comment=comment.to_dict())


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    request: CommentUpdateRequest,
    user: User = Depends(get_current_user)
):
    comment = await _get_comment(comment_id)
    ensure_owner_or_admin(user, comment.user_id, "edit this comment")

    updated = await CommentRepository.update(comment_id, request.content)
    return CommentResponse(message="Comment updated successfully", comment=updated.to_dict())


@router.delete("/{comment_id}", response_model=SuccessResponse)
async def delete_comment(comment_id: int, user: User = Depends(get_current_user)):
    """Delete a comment and, through the cascade, its replies"""
    comment = await _get_comment(comment_id)
    ensure_owner_or_admin(user, comment.user_id, "delete this comment")

    await CommentRepository.delete(comment_id)
    logger.info(f"Comment {comment_id} deleted by {user.username}")
    return SuccessResponse(message="Comment deleted successfully")
