"""
Bibliography collection.

This module provides the Bibliography class: an insertion-ordered
collection of SourceRecords keyed by record id.

Design principles:
- Insertion order preserved
- Records are replaced whole, never patched field by field
- Removal is final (no undo)
- Deterministic serialization
"""
import dataclasses
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .exceptions import RecordNotFoundError, ValidationError
from .models import SourceRecord, SourceType, normalize_source_type
from .name_utils import first_surname

# Sortable columns accepted by Bibliography.sorted_by
SORT_KEYS = ("title", "author", "year", "type", "added")


class Bibliography:
    """
    An ordered collection of citation records.

    Thread-safety note:
        This class does NOT provide thread-safety guarantees.
        Designed for request-scoped use; callers sharing one instance
        across threads must synchronize.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Optional[Iterable[SourceRecord]] = None):
        self._records: Dict[str, SourceRecord] = {}
        for record in records or ():
            self.add(record)

    def add(self, record: SourceRecord) -> SourceRecord:
        """
        Append a record to the end of the collection.

        Raises:
            TypeError: If record is not a SourceRecord
            ValidationError: If a record with the same id already exists
        """
        if not isinstance(record, SourceRecord):
            raise TypeError(f"Expected SourceRecord, got {type(record).__name__}")
        if record.id in self._records:
            raise ValidationError(f"Citation '{record.id}' already exists")
        self._records[record.id] = record
        return record

    def replace(self, record_id: str, record: SourceRecord) -> SourceRecord:
        """
        Replace the record stored under ``record_id``, keeping its position.

        The stored replacement always carries ``record_id``, whatever id
        the incoming record has.

        Raises:
            RecordNotFoundError: If no record has that id
        """
        if record_id not in self._records:
            raise RecordNotFoundError(record_id)
        if record.id != record_id:
            record = dataclasses.replace(record, id=record_id)
        self._records[record_id] = record
        return record

    def remove(self, record_id: str) -> SourceRecord:
        """
        Delete a record by id and return it.

        Raises:
            RecordNotFoundError: If no record has that id
        """
        try:
            return self._records.pop(record_id)
        except KeyError:
            raise RecordNotFoundError(record_id) from None

    def get(self, record_id: str) -> Optional[SourceRecord]:
        return self._records.get(record_id)

    def records(self) -> List[SourceRecord]:
        """Return the records in insertion order."""
        return list(self._records.values())

    def clear(self) -> None:
        self._records.clear()

    def sorted_by(self, key: str = "added", descending: bool = False) -> List[SourceRecord]:
        """
        Return the records sorted by one column.

        Args:
            key: One of "title", "author" (first author surname, "Unknown"
                 when there are no authors), "year" ("0" when empty),
                 "type" or "added" (insertion order)
            descending: Reverse the order

        Raises:
            ValidationError: If key is not a sortable column
        """
        if key not in SORT_KEYS:
            raise ValidationError(f"Cannot sort by {key!r}; expected one of {', '.join(SORT_KEYS)}")

        records = self.records()
        if key == "added":
            return list(reversed(records)) if descending else records

        def sort_value(record: SourceRecord) -> str:
            if key == "title":
                return record.title.lower()
            if key == "author":
                return first_surname(record.authors).lower()
            if key == "year":
                return record.year or "0"
            return record.type.value

        # sorted() is stable, so ties keep insertion order
        return sorted(records, key=sort_value, reverse=descending)

    def filter_by_type(self, source_type: Any = "all") -> List[SourceRecord]:
        """Return records of one source type, or every record for "all"."""
        if source_type is None or str(source_type).strip().lower() == "all":
            return self.records()
        wanted: SourceType = normalize_source_type(source_type)
        return [r for r in self._records.values() if r.type == wanted]

    def to_list(self) -> List[Dict[str, Any]]:
        """Serialize records, in order, for persistence."""
        return [record.to_dict() for record in self._records.values()]

    @classmethod
    def from_list(cls, items: Optional[Iterable[Dict[str, Any]]]) -> "Bibliography":
        """Rebuild a bibliography from ``to_list`` output."""
        return cls(SourceRecord.from_dict(item) for item in items or ())

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SourceRecord]:
        return iter(self.records())

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __repr__(self) -> str:
        return f"Bibliography(records={len(self._records)})"
