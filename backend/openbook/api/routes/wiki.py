from fastapi import APIRouter, Depends, status
from typing import Callable, Optional
import logging

import aiosqlite

from openbook.api.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    PageNotFoundError
)
from openbook.api.schemas import (
    PageCreateRequest,
    PageUpdateRequest,
    PageRenameRequest,
    PageProtectRequest,
    PageCommentsRequest,
    SectionCreateRequest,
    SectionUpdateRequest,
    SectionRenameRequest,
    SectionReorderRequest,
    PageResponse,
    PageListResponse,
    HistoryListResponse,
    HistoryDetailResponse,
    SectionListResponse,
    SectionResponse,
    SuccessResponse
)
from openbook.auth.dependencies import get_current_user, require_permission
from openbook.auth.policy import ensure_page_writable
from openbook.db.repositories import ActivityRepository, WikiPageRepository
from openbook.models.user import User
from openbook.models.wiki_page import WikiPage
from openbook.services import section_parser
from openbook.services.section_parser import SectionError, SectionNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wiki", tags=["wiki"])


async def _get_page(ref: str) -> WikiPage:
    page = await WikiPageRepository.resolve(ref)
    if not page:
        raise PageNotFoundError()
    return page


async def _log_page_activity(user: User, page: WikiPage, title: str, description: str, icon: str):
    await ActivityRepository.create(
        user_id=user.id,
        type="wiki",
        title=title,
        description=description,
        icon=icon,
        metadata={"pageId": page.id, "pageTitle": page.title}
    )


@router.get("/", response_model=PageListResponse)
async def list_pages():
    """All pages, most recently updated first"""
    pages = await WikiPageRepository.list_all()
    return PageListResponse(pages=[page.to_dict() for page in pages])


@router.post("/", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
async def create_page(
    request: PageCreateRequest,
    user: User = Depends(require_permission("create_pages"))
):
    if await WikiPageRepository.get_by_title(request.title):
        raise ConflictError("A page with this title already exists")

    try:
        page = await WikiPageRepository.create(
            title=request.title,
            content=request.content,
            author_id=user.id,
            is_protected=request.is_protected,
            icon=request.icon
        )
    except aiosqlite.IntegrityError:
        raise ConflictError("A page with this title already exists")

    await _log_page_activity(user, page, "Page created", f"Page '{page.title}' created", "file-plus")
    logger.info(f"Page '{page.title}' created by {user.username}")
    return PageResponse(message="Page created successfully", page=page.to_dict())


@router.get("/{ref}", response_model=PageResponse)
async def get_page(ref: str):
    """Get a page by numeric id, falling back to its title"""
    page = await _get_page(ref)
    return PageResponse(page=page.to_dict())


@router.put("/{ref}", response_model=PageResponse)
async def update_page(
    ref: str,
    request: PageUpdateRequest,
    user: User = Depends(get_current_user)
):
    """Update content and/or icon; the replaced version goes to history"""
    page = await _get_page(ref)
    await ensure_page_writable(user, page, "edit_pages")

    fields = request.model_dump(include={"content", "icon"}, exclude_unset=True)
    if request.content is None and "icon" not in fields:
        raise BadRequestError("Content or icon is required")

    updated = await WikiPageRepository.update_content(
        page.id, fields, user.id, change_reason=request.change_reason
    )
    await _log_page_activity(user, updated, "Page modified", f"Page '{updated.title}' modified", "edit")
    return PageResponse(message="Page updated successfully", page=updated.to_dict())


@router.put("/{ref}/rename", response_model=PageResponse)
async def rename_page(
    ref: str,
    request: PageRenameRequest,
    user: User = Depends(get_current_user)
):
    page = await _get_page(ref)
    await ensure_page_writable(user, page, "edit_pages")

    clash = await WikiPageRepository.get_by_title(request.title)
    if clash and clash.id != page.id:
        raise ConflictError("A page with this title already exists")

    try:
        updated = await WikiPageRepository.rename(page.id, request.title)
    except aiosqlite.IntegrityError:
        raise ConflictError("A page with this title already exists")

    await _log_page_activity(
        user, updated, "Page renamed", f"Page '{page.title}' renamed to '{updated.title}'", "edit"
    )
    return PageResponse(message="Page renamed successfully", page=updated.to_dict())


@router.put("/{ref}/protect", response_model=PageResponse)
async def protect_page(
    ref: str,
    request: PageProtectRequest,
    user: User = Depends(require_permission("protect_pages"))
):
    page = await _get_page(ref)
    updated = await WikiPageRepository.set_protection(page.id, request.is_protected)

    state = "protected" if request.is_protected else "unprotected"
    await _log_page_activity(user, updated, f"Page {state}", f"Page '{updated.title}' {state}", "shield")
    return PageResponse(message=f"Page {state} successfully", page=updated.to_dict())


@router.put("/{ref}/comments", response_model=PageResponse)
async def toggle_comments(
    ref: str,
    request: PageCommentsRequest,
    user: User = Depends(require_permission("protect_pages"))
):
    page = await _get_page(ref)
    updated = await WikiPageRepository.set_comments_enabled(page.id, request.comments_enabled)

    state = "enabled" if request.comments_enabled else "disabled"
    await _log_page_activity(
        user, updated, f"Comments {state}", f"Comments {state} on '{updated.title}'", "message-square"
    )
    return PageResponse(message=f"Comments {state} successfully", page=updated.to_dict())


@router.delete("/{ref}", response_model=SuccessResponse)
async def delete_page(ref: str, user: User = Depends(get_current_user)):
    """Delete a page together with its history and comments"""
    page = await _get_page(ref)
    await ensure_page_writable(user, page, "delete_pages")

    await WikiPageRepository.delete(page.id)
    await _log_page_activity(user, page, "Page deleted", f"Page '{page.title}' deleted", "trash")
    logger.info(f"Page '{page.title}' deleted by {user.username}")
    return SuccessResponse(message="Page deleted successfully")


# History

@router.get("/{ref}/history", response_model=HistoryListResponse)
async def get_page_history(ref: str):
    """Archived versions, newest first, without their content"""
    page = await _get_page(ref)
    history = await WikiPageRepository.get_history_for_page(page.id)
    return HistoryListResponse(history=[entry.to_dict() for entry in history])


async def _get_history_entry(page: WikiPage, history_id: int):
    entry = await WikiPageRepository.get_history_detail(history_id)
    if not entry or entry.page_id != page.id:
        raise NotFoundError("History entry not found")
    return entry


@router.get("/{ref}/history/{history_id}", response_model=HistoryDetailResponse)
async def get_history_detail(ref: str, history_id: int):
    page = await _get_page(ref)
    entry = await _get_history_entry(page, history_id)
    return HistoryDetailResponse(version=entry.to_dict())


@router.post("/{ref}/history/{history_id}/restore", response_model=PageResponse)
async def restore_history_version(
    ref: str,
    history_id: int,
    user: User = Depends(get_current_user)
):
    """Bring back an archived version through a normal update, so it is itself archived"""
    page = await _get_page(ref)
    await ensure_page_writable(user, page, "edit_pages")
    entry = await _get_history_entry(page, history_id)

    updated = await WikiPageRepository.update_content(
        page.id,
        {"content": entry.content},
        user.id,
        change_reason=f"Restored version {history_id}"
    )
    await _log_page_activity(
        user, updated, "Version restored", f"Page '{updated.title}' restored to version {history_id}", "history"
    )
    return PageResponse(message="Version restored successfully", page=updated.to_dict())


# Sections

async def _rewrite_sections(
    ref: str,
    user: User,
    permission: str,
    rewrite: Callable[[str], str],
    change_reason: str
) -> WikiPage:
    """Apply a section operation to the page content as one archived update"""
    page = await _get_page(ref)
    await ensure_page_writable(user, page, permission)

    try:
        new_content = rewrite(page.content)
    except SectionNotFoundError as e:
        raise NotFoundError(str(e))
    except SectionError as e:
        raise BadRequestError(str(e))

    updated = await WikiPageRepository.update_content(
        page.id, {"content": new_content}, user.id, change_reason=change_reason
    )
    await _log_page_activity(user, updated, "Page modified", change_reason, "edit")
    return updated


def _sections_payload(page: WikiPage):
    return [section.to_dict() for section in section_parser.parse_sections(page.content)]


@router.get("/{ref}/sections", response_model=SectionListResponse)
async def list_sections(ref: str):
    page = await _get_page(ref)
    return SectionListResponse(sections=_sections_payload(page))


@router.post("/{ref}/sections", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
async def add_section(
    ref: str,
    request: SectionCreateRequest,
    user: User = Depends(get_current_user)
):
    created = {}

    def rewrite(content: str) -> str:
        new_content, section = section_parser.add_section(
            content, request.title, request.content, section_id=request.id
        )
        created["section"] = section
        return new_content

    updated = await _rewrite_sections(
        ref, user, "create_sections", rewrite, f"Section '{request.title.strip()}' added"
    )
    return SectionResponse(
        message="Section added successfully",
        page=updated.to_dict(),
        section=created["section"].to_dict(),
        sections=_sections_payload(updated)
    )


@router.put("/{ref}/sections", response_model=SectionResponse)
async def reorder_sections(
    ref: str,
    request: SectionReorderRequest,
    user: User = Depends(get_current_user)
):
    updated = await _rewrite_sections(
        ref, user, "reorder_sections",
        lambda content: section_parser.reorder_sections(content, request.order),
        "Sections reordered"
    )
    return SectionResponse(
        message="Sections reordered successfully",
        page=updated.to_dict(),
        sections=_sections_payload(updated)
    )


def _section_by_id(page: WikiPage, section_id: str) -> Optional[dict]:
    for section in section_parser.parse_sections(page.content):
        if section.id == section_id:
            return section.to_dict()
    return None


@router.put("/{ref}/sections/{section_id}", response_model=SectionResponse)
async def update_section(
    ref: str,
    section_id: str,
    request: SectionUpdateRequest,
    user: User = Depends(get_current_user)
):
    updated = await _rewrite_sections(
        ref, user, "edit_sections",
        lambda content: section_parser.update_section(content, section_id, request.content, request.title),
        f"Section '{section_id}' updated"
    )
    return SectionResponse(
        message="Section updated successfully",
        page=updated.to_dict(),
        section=_section_by_id(updated, section_id),
        sections=_sections_payload(updated)
    )


@router.put("/{ref}/sections/{section_id}/rename", response_model=SectionResponse)
async def rename_section(
    ref: str,
    section_id: str,
    request: SectionRenameRequest,
    user: User = Depends(get_current_user)
):
    updated = await _rewrite_sections(
        ref, user, "edit_sections",
        lambda content: section_parser.rename_section(content, section_id, request.title),
        f"Section '{section_id}' renamed"
    )
    return SectionResponse(
        message="Section renamed successfully",
        page=updated.to_dict(),
        section=_section_by_id(updated, section_id),
        sections=_sections_payload(updated)
    )


@router.delete("/{ref}/sections/{section_id}", response_model=SectionResponse)
async def delete_section(
    ref: str,
    section_id: str,
    user: User = Depends(get_current_user)
):
    updated = await _rewrite_sections(
        ref, user, "delete_sections",
        lambda content: section_parser.delete_section(content, section_id),
        f"Section '{section_id}' deleted"
    )
    return SectionResponse(
        message="Section deleted successfully",
        page=updated.to_dict(),
        sections=_sections_payload(updated)
    )
