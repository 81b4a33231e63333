from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response, StreamingResponse
import logging

from openbook.api.errors import PageNotFoundError
from openbook.api.schemas import BulkExportRequest
from openbook.auth.dependencies import get_current_user
from openbook.db.repositories import WikiPageRepository
from openbook.models.user import User
from openbook.services import export_service
from openbook.services.export_service import ExportError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


async def _export(page_ref: str, export_format: str, user: User) -> Response:
    page = await WikiPageRepository.resolve(page_ref)
    if not page:
        raise PageNotFoundError()

    try:
        exported = await export_service.export_page(page, export_format)
    except ExportError as e:
        logger.error(f"Export of page {page.id} as {export_format} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export page as {export_format}"
        )

    logger.info(f"Page '{page.title}' exported as {export_format} by {user.username}")
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers=_attachment(exported.filename)
    )


@router.get("/{page_ref}/markdown")
async def export_markdown(page_ref: str, user: User = Depends(get_current_user)):
    return await _export(page_ref, "markdown", user)


@router.get("/{page_ref}/html")
async def export_html(page_ref: str, user: User = Depends(get_current_user)):
    return await _export(page_ref, "html", user)


@router.get("/{page_ref}/pdf")
async def export_pdf(page_ref: str, user: User = Depends(get_current_user)):
    """Print the HTML rendering to PDF with headless Chromium"""
    return await _export(page_ref, "pdf", user)


@router.post("/bulk")
async def export_bulk(request: BulkExportRequest, user: User = Depends(get_current_user)):
    """Stream a ZIP of several pages; pages that fail to export are left out"""
    logger.info(f"Bulk export of {len(request.page_ids)} page(s) as {request.format} by {user.username}")
    return StreamingResponse(
        export_service.stream_bulk_export(request.page_ids, request.format),
        media_type="application/zip",
        headers=_attachment(export_service.bulk_filename())
    )
