"""Tests for page exports."""
import io
import zipfile

import pytest

from openbook.services import export_service
from openbook.services.export_service import ExportError, sanitize_filename, unique_archive_name
from openbook.services.markdown_renderer import markdown_to_html


class TestMarkdownToHtml:

    def test_headers_and_emphasis(self):
        html = markdown_to_html("# Title\n## Sub\n### Minor\n**bold** and *italic*")
        assert "<h1>Title</h1>" in html
        assert "<h2>Sub</h2>" in html
        assert "<h3>Minor</h3>" in html
        assert "<strong>bold</strong> and <em>italic</em>" in html

    def test_paragraphs_and_line_breaks(self):
        assert markdown_to_html("one\n\ntwo\nthree") == "<p>one</p><p>two<br>three</p>"

    def test_code_is_escaped_and_left_alone(self):
        html = markdown_to_html("Use `<b>**x**</b>` here")
        assert "<code>&lt;b&gt;**x**&lt;/b&gt;</code>" in html
        assert "<strong>" not in html

    def test_fenced_code(self):
        html = markdown_to_html("```python\nx = 1 * 2 * 3\n```")
        assert '<pre><code class="language-python">x = 1 * 2 * 3</code></pre>' in html

    def test_links(self):
        html = markdown_to_html("[Docs](http://docs.test/a_b_c)")
        assert '<a href="http://docs.test/a_b_c">Docs</a>' in html

    def test_snake_case_is_not_italic(self):
        assert "<em>" not in markdown_to_html("my_var_name")


class TestFilenames:

    def test_sanitize(self):
        assert sanitize_filename("Hello, World!") == "hello_world_"
        assert sanitize_filename("Getting Started") == "getting_started"

    def test_unique_archive_name(self):
        used = set()
        assert unique_archive_name("page.md", used) == "page.md"
        assert unique_archive_name("page.md", used) == "page_1.md"
        assert unique_archive_name("page.md", used) == "page_2.md"


@pytest.fixture
def stub_pdf(monkeypatch):
    async def render_pdf(html):
        if "<title>Home</title>" in html:
            raise ExportError("Failed to generate PDF")
        return b"%PDF-1.4 stub"

    monkeypatch.setattr(export_service, "render_pdf", render_pdf)


class TestExportEndpoints:

    def test_requires_authentication(self, client, sample_page):
        assert client.get(f"/api/export/{sample_page['id']}/markdown").status_code == 401

    def test_markdown(self, client, contributor_headers, sample_page):
        response = client.get(f"/api/export/{sample_page['id']}/markdown", headers=contributor_headers)
        assert response.status_code == 200
        assert response.headers["content-disposition"] == 'attachment; filename="sample_page.md"'
        assert response.text.startswith(
            "# Sample Page\n\nOriginal content\n\n---\n*Exported from Open Book Wiki*\n*Last updated: "
        )

    def test_html(self, client, contributor_headers, sample_page):
        response = client.get("/api/export/Sample Page/html", headers=contributor_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "<title>Sample Page</title>" in response.text
        assert "Exported from Open Book Wiki" in response.text

    def test_pdf(self, client, contributor_headers, sample_page, stub_pdf):
        response = client.get(f"/api/export/{sample_page['id']}/pdf", headers=contributor_headers)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content == b"%PDF-1.4 stub"

    def test_pdf_failure(self, client, contributor_headers, stub_pdf):
        response = client.get("/api/export/Home/pdf", headers=contributor_headers)
        assert response.status_code == 500

    def test_unknown_page(self, client, contributor_headers):
        assert client.get("/api/export/9999/markdown", headers=contributor_headers).status_code == 404


class TestBulkExport:

    def _archive(self, response):
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert response.headers["content-disposition"].startswith('attachment; filename="wiki-export-')
        return zipfile.ZipFile(io.BytesIO(response.content))

    def test_bulk_markdown(self, client, admin_headers, sample_page):
        client.post("/api/wiki/", json={"title": "sample page", "content": "lower"}, headers=admin_headers)

        response = client.post(
            "/api/export/bulk",
            json={"pageIds": [sample_page["id"], "Home", "sample page", 9999], "format": "markdown"},
            headers=admin_headers
        )
        archive = self._archive(response)
        assert archive.namelist() == ["sample_page.md", "home.md", "sample_page_1.md"]
        assert archive.read("sample_page_1.md").decode("utf-8").startswith("# sample page\n\nlower")

    def test_bulk_pdf_skips_failures(self, client, admin_headers, sample_page, stub_pdf):
        response = client.post(
            "/api/export/bulk",
            json={"pageIds": ["Home", sample_page["id"]], "format": "pdf"},
            headers=admin_headers
        )
        archive = self._archive(response)
        assert archive.namelist() == ["sample_page.pdf"]
        assert archive.read("sample_page.pdf") == b"%PDF-1.4 stub"

    def test_bulk_requires_pages(self, client, admin_headers):
        response = client.post("/api/export/bulk", json={"pageIds": []}, headers=admin_headers)
        assert response.status_code == 422
