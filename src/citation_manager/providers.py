"""
Interfaces for the collaborators that supply records.

Article search and URL metadata extraction happen outside the citation
manager. These base classes describe what they hand over; the helper
functions turn their raw output into SourceRecords.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

from .exceptions import ValidationError
from .models import SourceRecord, SourceType


class SearchProvider(ABC):
    """Abstract base class for article search backends."""

    @abstractmethod
    def search(self, query: str, limit: int = 10) -> List[SourceRecord]:
        """Return candidate records, each carrying a ``confidence`` in [0, 1]."""
        pass


class MetadataExtractor(ABC):
    """Abstract base class for URL metadata extraction."""

    @abstractmethod
    def extract(self, url: str) -> SourceRecord:
        """Return a partially populated record describing the page at url."""
        pass


def record_from_search_result(result: Dict[str, Any]) -> SourceRecord:
    """
    Build a stored record from a selected search result.

    The result's confidence score is kept as display metadata. Search
    results are stored as articles unless they say otherwise.
    """
    data = dict(result)
    data.setdefault("type", SourceType.ARTICLE.value)
    data.pop("id", None)
    return SourceRecord.from_dict(data)


def record_from_url_metadata(
    metadata: Dict[str, Any],
    url: Optional[str] = None,
    accessed: Optional[date] = None,
) -> SourceRecord:
    """
    Build a stored record from extracted page metadata.

    Extracted pages are websites unless the metadata names another type;
    the access date defaults to today. The metadata must name the
    publishing source (site or journal).
    """
    data = dict(metadata)
    if not str(data.get("source") or data.get("journal") or "").strip():
        raise ValidationError("Extracted metadata must name a source")
    if url:
        data.setdefault("url", url)
    if not data.get("type"):
        data["type"] = SourceType.WEBSITE.value
    if not (data.get("date_accessed") or data.get("dateAccessed")):
        data["date_accessed"] = (accessed or date.today()).isoformat()
    data.pop("id", None)
    return SourceRecord.from_dict(data)
