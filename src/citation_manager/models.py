"""Data models for the citation manager."""
import uuid
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .exceptions import ValidationError


class SourceType(str, Enum):
    """The four kinds of source a stored record can be."""
    ARTICLE = "article"
    JOURNAL = "journal"
    WEBSITE = "website"
    BOOK = "book"


# Extra kinds offered by the manual entry form; stored as plain articles.
FORM_SUBTYPES: Tuple[str, ...] = ("newspaper", "thesis", "conference", "report")

OPTIONAL_FIELDS: Tuple[str, ...] = (
    "url", "doi", "pages", "volume", "issue", "publisher", "date_accessed"
)

# Alternative key spellings accepted by SourceRecord.from_dict
_KEY_ALIASES = {
    "dateAccessed": "date_accessed",
    "access_date": "date_accessed",
    "pub_type": "type",
    "journal": "source",
}


def normalize_source_type(value: Any) -> SourceType:
    """Map a source type (including form-only subtypes) onto SourceType."""
    if isinstance(value, SourceType):
        return value
    key = str(value or "").strip().lower()
    if key in FORM_SUBTYPES:
        return SourceType.ARTICLE
    try:
        return SourceType(key)
    except ValueError:
        raise ValidationError(f"Unknown source type: {value!r}") from None


def new_record_id(prefix: str = "citation") -> str:
    """Return a fresh opaque record id."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _clean_authors(authors: Any) -> Tuple[str, ...]:
    if authors is None:
        return ()
    if isinstance(authors, str):
        authors = [authors]
    return tuple(str(a).strip() for a in authors if a is not None and str(a).strip())


@dataclass(frozen=True)
class SourceRecord:
    """
    A citable source.

    Records are immutable: edits go through ``with_changes`` which returns a
    new record carrying the same id, so a rendered citation can never go
    stale against the record it was rendered from.

    Authors keep their insertion order; the first author drives in-text
    citations, sorting and citation keys. ``confidence`` is display-only
    metadata from search results and is ignored by formatting and export.
    """
    title: str
    type: SourceType = SourceType.ARTICLE
    authors: Tuple[str, ...] = ()
    year: str = ""
    source: str = ""
    url: str = ""
    doi: str = ""
    pages: str = ""
    volume: str = ""
    issue: str = ""
    publisher: str = ""
    date_accessed: str = ""
    confidence: Optional[float] = None
    id: str = field(default_factory=new_record_id)

    def __post_init__(self):
        if self.title is None or not str(self.title).strip():
            raise ValidationError("A citation must have a title")
        object.__setattr__(self, "title", str(self.title))
        object.__setattr__(self, "type", normalize_source_type(self.type))
        object.__setattr__(self, "authors", _clean_authors(self.authors))

        for name in ("year", "source") + OPTIONAL_FIELDS:
            value = getattr(self, name)
            object.__setattr__(self, name, "" if value is None else str(value).strip())

        if self.confidence is not None:
            try:
                confidence = float(self.confidence)
            except (TypeError, ValueError):
                raise ValidationError(f"confidence must be a number, got {self.confidence!r}") from None
            if not 0.0 <= confidence <= 1.0:
                raise ValidationError(f"confidence must be between 0 and 1, got {confidence}")
            object.__setattr__(self, "confidence", confidence)

        if not self.id:
            object.__setattr__(self, "id", new_record_id())

    @property
    def page_range(self) -> Tuple[str, Optional[str]]:
        """Split ``pages`` into (start, end); end is None without a hyphen or after a trailing one."""
        if not self.pages:
            return "", None
        if "-" in self.pages:
            parts = self.pages.split("-")
            return parts[0].strip(), parts[1].strip() or None
        return self.pages, None

    def missing_fields(self) -> List[str]:
        """Names of descriptive fields that are empty on this record."""
        missing = [name for name in ("authors", "year", "source") if not getattr(self, name)]
        missing.extend(name for name in OPTIONAL_FIELDS if not getattr(self, name))
        return missing

    def with_changes(self, **changes) -> "SourceRecord":
        """Return a copy of this record with the given fields replaced."""
        changes.pop("id", None)
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        data = asdict(self)
        data["type"] = self.type.value
        data["authors"] = list(self.authors)
        if data["confidence"] is None:
            del data["confidence"]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceRecord":
        """Create a record from a dictionary, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ValidationError("Citation data must be a JSON object")
        known = set(cls.__dataclass_fields__)
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name in known and name not in kwargs:
                kwargs[name] = value
        if "title" not in kwargs:
            raise ValidationError("A citation must have a title")
        return cls(**kwargs)


def records_from_dicts(items: Iterable[Dict[str, Any]]) -> List[SourceRecord]:
    """Build records from an iterable of dictionaries."""
    return [SourceRecord.from_dict(item) for item in items]
