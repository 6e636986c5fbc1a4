"""Tests for the citation manager web app."""
import gc
import io
from datetime import date

import pytest
from docx import Document

from citation_manager.storage import MemoryStore
from ui.app import create_app


@pytest.fixture
def journal_id(client, sample_payload):
    resp = client.post("/citations", json=sample_payload)
    assert resp.status_code == 201
    return resp.get_json()["id"]


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.data == b"ok"


class TestCitations:
    """Create, read, replace and delete citations."""

    def test_add_returns_rendered_citation(self, client, sample_payload):
        resp = client.post("/citations", json=sample_payload)
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["type"] == "journal"
        assert data["citation"] == (
            "Smith, John, Doe, Jane (2023). A Sample Publication Title. "
            "*Journal of Testing*, 12(3), 123-145."
        )
        assert data["in_text"] == "(Smith & Doe, 2023)"

    def test_add_invalid_lists_field_errors(self, client):
        resp = client.post("/citations", json={"type": "journal", "title": "Paper"})
        assert resp.status_code == 400
        data = resp.get_json()
        assert data["error"] == "Invalid citation"
        assert "authors" in data["fields"]

    def test_add_requires_json_object(self, client):
        resp = client.post("/citations", data="title=Paper")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Request body must be a JSON object"

    def test_list(self, client, journal_id):
        client.post("/citations", json={
            "type": "website", "title": "Climate Data Portal", "url": "https://www.noaa.gov/climate",
        })
        data = client.get("/citations?sort=title").get_json()
        assert data["style"] == "apa"
        assert [c["title"] for c in data["citations"]] == ["A Sample Publication Title", "Climate Data Portal"]

        websites = client.get("/citations?type=website").get_json()["citations"]
        assert [c["type"] for c in websites] == ["website"]

    def test_list_rejects_unknown_sort(self, client):
        assert client.get("/citations?sort=colour").status_code == 400

    def test_get(self, client, journal_id):
        resp = client.get(f"/citations/{journal_id}")
        assert resp.status_code == 200
        assert resp.get_json()["title"] == "A Sample Publication Title"

    def test_get_missing(self, client):
        resp = client.get("/citations/citation-missing")
        assert resp.status_code == 404
        assert "not found" in resp.get_json()["error"]

    def test_replace(self, client, journal_id, sample_payload):
        payload = dict(sample_payload, title="A Revised Title", pages="")
        resp = client.put(f"/citations/{journal_id}", json=payload)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["id"] == journal_id
        assert data["title"] == "A Revised Title"
        assert data["pages"] == ""

    def test_replace_invalid(self, client, journal_id):
        resp = client.put(f"/citations/{journal_id}", json={"type": "book", "title": "Book"})
        assert resp.status_code == 400
        assert "publisher" in resp.get_json()["fields"]

    def test_replace_missing(self, client, sample_payload):
        assert client.put("/citations/citation-missing", json=sample_payload).status_code == 404

    def test_delete(self, client, journal_id):
        assert client.delete(f"/citations/{journal_id}").status_code == 204
        assert client.get(f"/citations/{journal_id}").status_code == 404

    def test_from_search(self, client):
        resp = client.post("/citations/from-search", json={
            "id": "search-7", "title": "Deep Learning for X", "authors": ["Smith, John"],
            "year": "2023", "journal": "Journal of Testing", "confidence": 0.8,
        })
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["type"] == "article"
        assert data["confidence"] == 0.8
        assert data["id"] != "search-7"

    def test_from_url(self, client):
        resp = client.post("/citations/from-url", json={
            "title": "Climate Data Portal", "url": "https://www.noaa.gov/climate", "source": "NOAA",
        })
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["type"] == "website"
        assert data["date_accessed"] == date.today().isoformat()

    def test_from_url_without_source(self, client):
        resp = client.post("/citations/from-url", json={"title": "Page", "url": "https://a.example"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Extracted metadata must name a source"


class TestFormatting:
    """Rendering routes."""

    def test_format_with_style_and_page(self, client, journal_id):
        data = client.get(f"/citations/{journal_id}/format?style=MLA&page=130").get_json()
        assert data["style"] == "mla"
        assert data["citation"].startswith('Smith, John, Doe, Jane. "A Sample Publication Title."')
        assert data["in_text"] == "(Smith 130)"

    def test_format_unknown_style(self, client, journal_id):
        assert client.get(f"/citations/{journal_id}/format?style=ieee").status_code == 400

    def test_bibliography(self, client, journal_id):
        resp = client.get("/bibliography?style=harvard")
        assert resp.mimetype == "text/plain"
        assert resp.get_data(as_text=True).startswith("Smith, John, Doe, Jane (2023) 'A Sample Publication Title'")

    def test_preferred_style(self, client, journal_id):
        data = client.get("/preferred-style").get_json()
        assert data["style"] == "apa"
        assert data["available"]["chicago"] == "Chicago Manual"

        resp = client.put("/preferred-style", json={"style": "chicago"})
        assert resp.get_json() == {"style": "chicago", "name": "Chicago Manual"}
        assert client.get(f"/citations/{journal_id}").get_json()["in_text"] == "(Smith 2023)"

    def test_preferred_style_rejects_unknown(self, client):
        resp = client.put("/preferred-style", json={"style": "ieee"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Unsupported citation style: ieee"


class TestExport:
    """Export downloads."""

    def test_bibtex_download(self, client, journal_id):
        resp = client.get("/export/bibtex")
        assert resp.status_code == 200
        assert resp.mimetype == "text/plain"
        filename = f"bibliography-bibtex-{date.today().isoformat()}.bib"
        assert resp.headers["Content-Disposition"] == f"attachment; filename={filename}"
        assert resp.get_data(as_text=True).startswith("@article{smith2023asamplepublicationtitle,")

    def test_text_download_named_after_style(self, client, journal_id):
        resp = client.get("/export/text?style=mla")
        assert f"bibliography-mla-{date.today().isoformat()}.txt" in resp.headers["Content-Disposition"]

    def test_docx_download(self, client, journal_id):
        resp = client.get("/export/docx")
        assert resp.status_code == 200
        assert resp.mimetype.endswith("wordprocessingml.document")
        doc = Document(io.BytesIO(resp.data))
        assert doc.paragraphs[0].text == "References"

    def test_empty_bibliography(self, client):
        resp = client.get("/export/ris")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "No citations to export"

    def test_unknown_format(self, client, journal_id):
        resp = client.get("/export/pdf")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Unsupported export format: pdf"


class TestErrors:
    """JSON error responses."""

    def test_unknown_route(self, client):
        resp = client.get("/nowhere")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Not found"}

    def test_method_not_allowed(self, client):
        resp = client.patch("/citations")
        assert resp.status_code == 405
        assert resp.get_json() == {"error": "Method not allowed"}

    def test_rate_limit(self):
        app = create_app(store=MemoryStore(), config={"TESTING": True, "RATELIMIT_DEFAULT": "2 per minute"})
        client = app.test_client()
        assert client.get("/citations").status_code == 200
        assert client.get("/citations").status_code == 200
        resp = client.get("/citations")
        assert resp.status_code == 429
        assert "Rate limit exceeded" in resp.get_json()["error"]
        assert client.get("/health").status_code == 200

    def test_limited_routes_survive_garbage_collection(self, sample_payload):
        app = create_app(store=MemoryStore(), config={"TESTING": True})
        gc.collect()
        client = app.test_client()
        assert client.post("/citations", json=sample_payload).status_code == 201
        assert client.get("/export/ris").status_code == 200
        assert client.get("/health").status_code == 200

    def test_non_numeric_confidence_rejected(self, client):
        resp = client.post("/citations/from-search", json={"title": "T", "confidence": "high"})
        assert resp.status_code == 400
        assert "confidence" in resp.get_json()["error"]
