"""Tests for the SourceRecord data model."""
import dataclasses

import pytest

from citation_manager.exceptions import ValidationError
from citation_manager.models import (
    SourceRecord,
    SourceType,
    new_record_id,
    normalize_source_type,
    records_from_dicts,
)


class TestSourceType:
    """Tests for source type normalisation."""

    def test_persisted_types(self):
        """The four stored types map onto themselves."""
        for value in ("article", "journal", "website", "book"):
            assert normalize_source_type(value).value == value

    def test_form_subtypes_become_article(self):
        """Form-only subtypes are stored as articles."""
        for value in ("newspaper", "thesis", "conference", "report"):
            assert normalize_source_type(value) == SourceType.ARTICLE

    def test_case_insensitive(self):
        assert normalize_source_type(" Journal ") == SourceType.JOURNAL

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            normalize_source_type("podcast")


class TestSourceRecord:
    """Tests for record construction and invariants."""

    def test_title_required(self):
        """A blank title is rejected."""
        with pytest.raises(ValidationError):
            SourceRecord(title="   ")

    def test_defaults(self):
        record = SourceRecord(title="Notes")
        assert record.type == SourceType.ARTICLE
        assert record.authors == ()
        assert record.year == ""
        assert record.confidence is None
        assert record.id.startswith("citation-")

    def test_ids_are_unique(self):
        assert new_record_id() != new_record_id()
        assert SourceRecord(title="A").id != SourceRecord(title="A").id

    def test_authors_keep_order_and_drop_blanks(self):
        record = SourceRecord(title="T", authors=["Zed, A.", " ", "Abe, B."])
        assert record.authors == ("Zed, A.", "Abe, B.")

    def test_single_author_string(self):
        record = SourceRecord(title="T", authors="Smith, John")
        assert record.authors == ("Smith, John",)

    def test_none_fields_become_empty(self):
        record = SourceRecord(title="T", year=None, url=None)
        assert record.year == ""
        assert record.url == ""

    def test_confidence_range(self):
        assert SourceRecord(title="T", confidence=0.75).confidence == 0.75
        with pytest.raises(ValidationError):
            SourceRecord(title="T", confidence=1.5)

    def test_confidence_must_be_numeric(self):
        with pytest.raises(ValidationError, match="confidence must be a number"):
            SourceRecord(title="T", confidence="high")

    def test_records_are_immutable(self):
        record = SourceRecord(title="T")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.title = "Changed"


class TestPageRange:
    """Tests for splitting pages into start and end."""

    def test_range(self):
        assert SourceRecord(title="T", pages="123-145").page_range == ("123", "145")

    def test_single_page(self):
        assert SourceRecord(title="T", pages="99").page_range == ("99", None)

    def test_trailing_hyphen_has_no_end(self):
        assert SourceRecord(title="T", pages="10-").page_range == ("10", None)

    def test_no_pages(self):
        assert SourceRecord(title="T").page_range == ("", None)


class TestRecordChanges:
    """Tests for whole-record edits."""

    def test_with_changes_keeps_id(self, journal_record):
        updated = journal_record.with_changes(title="New Title", id="other")
        assert updated.id == journal_record.id
        assert updated.title == "New Title"
        assert journal_record.title == "Climate Models"

    def test_missing_fields(self, bare_record):
        missing = bare_record.missing_fields()
        assert "authors" in missing
        assert "year" in missing
        assert "url" in missing


class TestSerialization:
    """Tests for dictionary round trips."""

    def test_to_dict(self, journal_record):
        data = journal_record.to_dict()
        assert data["type"] == "journal"
        assert data["authors"] == ["Lee, A.", "Kim, B."]
        assert "confidence" not in data

    def test_from_dict_restores_record(self, journal_record):
        assert SourceRecord.from_dict(journal_record.to_dict()) == journal_record

    def test_from_dict_aliases(self):
        record = SourceRecord.from_dict({
            "title": "Page",
            "type": "website",
            "dateAccessed": "2024-01-01",
            "unknown_key": "ignored",
        })
        assert record.date_accessed == "2024-01-01"

    def test_from_dict_requires_title(self):
        with pytest.raises(ValidationError):
            SourceRecord.from_dict({"authors": ["Smith, J."]})

    def test_from_dict_rejects_non_dict(self):
        with pytest.raises(ValidationError):
            SourceRecord.from_dict(["not", "a", "dict"])

    def test_records_from_dicts(self):
        records = records_from_dicts([{"title": "A"}, {"title": "B"}])
        assert [r.title for r in records] == ["A", "B"]
