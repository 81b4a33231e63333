"""Lightweight markdown to HTML conversion used by page exports."""
import re
from html import escape
from typing import List

FENCED_CODE = re.compile(r"```([\w+-]*)[ \t]*\n?([\s\S]*?)```")
INLINE_CODE = re.compile(r"`([^`\n]+)`")
HEADERS = [
    (re.compile(r"^### (.*)$", re.MULTILINE), r"<h3>\1</h3>"),
    (re.compile(r"^## (.*)$", re.MULTILINE), r"<h2>\1</h2>"),
    (re.compile(r"^# (.*)$", re.MULTILINE), r"<h1>\1</h1>"),
]
LINK = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
BOLD = [
    re.compile(r"\*\*(.+?)\*\*"),
    re.compile(r"(?<!\w)__(.+?)__(?!\w)"),
]
ITALIC = [
    re.compile(r"\*(.+?)\*"),
    re.compile(r"(?<!\w)_(.+?)_(?!\w)"),
]
PLACEHOLDER = re.compile(r"\x00(\d+)\x00")


def markdown_to_html(markdown: str) -> str:
    """
    Convert a markdown subset to HTML: h1-h3 headers, bold, italics, links,
    fenced and inline code, paragraphs and line breaks. Code is escaped and
    left untouched by the other rules; everything else passes through as-is.
    """
    stash: List[str] = []

    def keep(html: str) -> str:
        stash.append(html)
        return f"\x00{len(stash) - 1}\x00"

    def fenced(match: re.Match) -> str:
        language = match.group(1)
        css_class = f' class="language-{language}"' if language else ""
        return keep(f"<pre><code{css_class}>{escape(match.group(2).rstrip(chr(10)))}</code></pre>")

    html = (markdown or "").replace("\r\n", "\n")
    html = FENCED_CODE.sub(fenced, html)
    html = INLINE_CODE.sub(lambda m: keep(f"<code>{escape(m.group(1))}</code>"), html)

    for pattern, replacement in HEADERS:
        html = pattern.sub(replacement, html)

    html = LINK.sub(lambda m: keep(f'<a href="{escape(m.group(2))}">') + m.group(1) + keep("</a>"), html)

    for pattern in BOLD:
        html = pattern.sub(r"<strong>\1</strong>", html)
    for pattern in ITALIC:
        html = pattern.sub(r"<em>\1</em>", html)

    html = html.replace("\n\n", "</p><p>")
    html = html.replace("\n", "<br>")
    html = f"<p>{html}</p>"

    return PLACEHOLDER.sub(lambda m: stash[int(m.group(1))], html)
