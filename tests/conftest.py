"""Pytest configuration and fixtures."""
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# Make src/ and the project root (for ui/) importable without installing
PROJECT_ROOT = Path(__file__).parent.parent
for path in (PROJECT_ROOT / "src", PROJECT_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from citation_manager.config import Config
from citation_manager.models import SourceRecord


@pytest.fixture
def journal_record() -> SourceRecord:
    """A fully populated journal article."""
    return SourceRecord(
        id="citation-journal",
        title="Climate Models",
        authors=["Lee, A.", "Kim, B."],
        year="2021",
        source="Nature",
        type="journal",
        volume="12",
        issue="4",
        pages="10-20",
        doi="10.1038/nature.2021.123",
    )


@pytest.fixture
def website_record() -> SourceRecord:
    """A web page with URL and access date."""
    return SourceRecord(
        id="citation-website",
        title="Climate Data Portal",
        authors=["Jones, Mary"],
        year="2022",
        source="NOAA",
        type="website",
        url="https://www.noaa.gov/climate",
        date_accessed="2024-03-15",
    )


@pytest.fixture
def book_record() -> SourceRecord:
    """A single-author book."""
    return SourceRecord(
        id="citation-book",
        title="The Art of Programming",
        authors=["Knuth, Donald"],
        year="1997",
        source="Addison-Wesley",
        type="book",
        publisher="Addison-Wesley",
    )


@pytest.fixture
def bare_record() -> SourceRecord:
    """A record with nothing but a title."""
    return SourceRecord(id="citation-bare", title="Untitled Notes")


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """A manual-entry payload for a journal article."""
    return {
        "type": "journal",
        "title": "A Sample Publication Title",
        "authors": ["Smith, John", "Doe, Jane"],
        "year": "2023",
        "source": "Journal of Testing",
        "volume": "12",
        "issue": "3",
        "pages": "123-145",
        "doi": "10.1234/test.2023.456",
    }


@pytest.fixture(autouse=True)
def default_config(monkeypatch, tmp_path) -> None:
    """Pin configuration that tests depend on."""
    monkeypatch.setattr(Config, "DEFAULT_STYLE", "apa")
    monkeypatch.setattr(Config, "ESCAPE_SPECIAL_CHARS", False)
    monkeypatch.setattr(Config, "EXPORT_FOLDER", str(tmp_path / "exports"))


@pytest.fixture
def app():
    """Web app backed by an in-memory store, rate limiting off."""
    from citation_manager.storage import MemoryStore
    from ui.app import create_app

    return create_app(store=MemoryStore(), config={"TESTING": True, "RATELIMIT_ENABLED": False})


@pytest.fixture
def client(app):
    return app.test_client()
