"""Page exports: Markdown, standalone HTML, PDF and streamed ZIP bundles."""
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import date
from html import escape
from typing import AsyncIterator, Iterable, List, Set, Union

from playwright.async_api import Error as PlaywrightError, async_playwright

from openbook.core.config import settings
from openbook.db.repositories import WikiPageRepository
from openbook.models.wiki_page import WikiPage
from openbook.services.markdown_renderer import markdown_to_html

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("markdown", "html", "pdf")

MEDIA_TYPES = {
    "markdown": "text/markdown; charset=utf-8",
    "html": "text/html; charset=utf-8",
    "pdf": "application/pdf",
    "zip": "application/zip",
}

EXTENSIONS = {"markdown": "md", "html": "html", "pdf": "pdf"}

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            line-height: 1.6;
            max-width: 800px;
            margin: 0 auto;
            padding: 2rem;
            color: #333;
        }}
        h1, h2, h3, h4, h5, h6 {{
            margin-top: 1.5em;
            margin-bottom: 0.5em;
            font-weight: 600;
        }}
        h1 {{ font-size: 2em; border-bottom: 2px solid #eee; padding-bottom: 0.3em; }}
        h2 {{ font-size: 1.5em; border-bottom: 1px solid #eee; padding-bottom: 0.3em; }}
        code {{
            background: #f4f4f4;
            padding: 2px 6px;
            border-radius: 3px;
            font-family: 'Courier New', monospace;
        }}
        pre {{
            background: #f4f4f4;
            padding: 1rem;
            border-radius: 5px;
            overflow-x: auto;
        }}
        pre code {{ background: none; padding: 0; }}
        blockquote {{
            border-left: 4px solid #ddd;
            padding-left: 1rem;
            margin-left: 0;
            color: #666;
        }}
        .footer {{
            margin-top: 3rem;
            padding-top: 1rem;
            border-top: 1px solid #eee;
            color: #666;
            font-size: 0.9em;
        }}
    </style>
</head>
<body>
    <h1>{title}</h1>
    {body}
    <div class="footer">
        <p><em>{footer}</em></p>
        <p><em>Last updated: {updated_at}</em></p>
    </div>
</body>
</html>"""


class ExportError(Exception):
    """Raised when a page cannot be rendered in the requested format"""


@dataclass
class ExportedFile:
    filename: str
    content: bytes
    media_type: str


def sanitize_filename(title: str) -> str:
    """Collapse every run of non-alphanumerics to '_' and lower-case the result"""
    name = re.sub(r"[^a-z0-9]", "_", title, flags=re.IGNORECASE)
    return re.sub(r"_+", "_", name).lower()


def _format_updated_at(page: WikiPage) -> str:
    return page.updated_at.strftime("%Y-%m-%d %H:%M:%S") if page.updated_at else ""


def render_markdown(page: WikiPage) -> str:
    return (
        f"# {page.title}\n\n{page.content}\n\n---\n"
        f"*{settings.EXPORT_FOOTER}*\n"
        f"*Last updated: {_format_updated_at(page)}*"
    )


def render_html(page: WikiPage) -> str:
    return HTML_TEMPLATE.format(
        title=escape(page.title),
        body=markdown_to_html(page.content),
        footer=escape(settings.EXPORT_FOOTER),
        updated_at=_format_updated_at(page),
    )


async def render_pdf(html: str) -> bytes:
    """Print an HTML document with headless Chromium; the browser is always closed"""
    margin = settings.PDF_MARGIN
    try:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=True, args=["--no-sandbox", "--disable-setuid-sandbox"]
            )
            try:
                browser_page = await browser.new_page()
                await browser_page.set_content(
                    html, wait_until="networkidle", timeout=settings.PDF_RENDER_TIMEOUT_MS
                )
                return await browser_page.pdf(
                    format=settings.PDF_FORMAT,
                    margin={"top": margin, "right": margin, "bottom": margin, "left": margin},
                    print_background=True,
                )
            finally:
                await browser.close()
    except PlaywrightError as e:
        logger.error(f"Error generating PDF: {e}")
        raise ExportError("Failed to generate PDF") from e


async def export_page(page: WikiPage, export_format: str) -> ExportedFile:
    """Render one page in the given format"""
    if export_format not in EXPORT_FORMATS:
        raise ExportError(f"Unsupported export format '{export_format}'")

    filename = f"{sanitize_filename(page.title)}.{EXTENSIONS[export_format]}"
    if export_format == "markdown":
        content = render_markdown(page).encode("utf-8")
    elif export_format == "html":
        content = render_html(page).encode("utf-8")
    else:
        content = await render_pdf(render_html(page))

    return ExportedFile(filename=filename, content=content, media_type=MEDIA_TYPES[export_format])


def bulk_filename() -> str:
    return f"wiki-export-{date.today().isoformat()}.zip"


def unique_archive_name(filename: str, used: Set[str]) -> str:
    """Suffix a number before the extension until the name is unused"""
    candidate = filename
    stem, dot, extension = filename.rpartition(".")
    counter = 1
    while candidate in used:
        candidate = f"{stem}_{counter}{dot}{extension}" if dot else f"{filename}_{counter}"
        counter += 1
    used.add(candidate)
    return candidate


class _ChunkSink:
    """Write-only, non-seekable file object that hands written bytes back in chunks"""

    def __init__(self):
        self._chunks: List[bytes] = []

    def write(self, data) -> int:
        self._chunks.append(bytes(data))
        return len(data)

    def flush(self):
        pass

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data


async def stream_bulk_export(page_refs: Iterable[Union[int, str]], export_format: str) -> AsyncIterator[bytes]:
    """
    Yield a ZIP archive of the given pages chunk by chunk.

    A page that is missing or fails to render is logged and left out of the
    archive; the other pages are still exported.
    """
    sink = _ChunkSink()
    used_names: Set[str] = set()
    exported_count = 0

    with zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for ref in page_refs:
            page = await WikiPageRepository.resolve(ref)
            if page is None:
                logger.error(f"Error exporting page {ref}: page not found")
                continue
            try:
                exported = await export_page(page, export_format)
            except ExportError as e:
                logger.error(f"Error exporting page {ref}: {e}")
                continue

            archive.writestr(unique_archive_name(exported.filename, used_names), exported.content)
            exported_count += 1
            chunk = sink.drain()
            if chunk:
                yield chunk

    logger.info(f"Bulk export finished: {exported_count} page(s) as {export_format}")
    yield sink.drain()
