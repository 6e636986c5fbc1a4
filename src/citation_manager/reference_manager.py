"""
Citation Manager - application shell

ReferenceManager owns the bibliography and the preferred style, and reads
and writes both through an injected key-value store. Formatting and export
are delegated to the pure functions in ``formatting`` and ``exporters``,
always with the current records passed in explicitly.
"""
import logging
import os
from typing import Any, Dict, List, Optional, Tuple, Union

from . import exporters
from .bibliography import Bibliography
from .config import Config
from .exceptions import RecordNotFoundError
from .formatting import Style, format_full, format_in_text
from .models import SourceRecord
from .storage import KeyValueStore, MemoryStore
from .utils.logging_setup import log_operation

logger = logging.getLogger(__name__)

RecordInput = Union[SourceRecord, Dict[str, Any]]


def _as_record(data: RecordInput) -> SourceRecord:
    if isinstance(data, SourceRecord):
        return data
    return SourceRecord.from_dict(data)


class ReferenceManager:
    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store: KeyValueStore = store if store is not None else MemoryStore()
        self.bibliography = Bibliography.from_list(self.store.get(Config.BIBLIOGRAPHY_KEY, []))
        self._style = self._load_style()
        logger.debug(f"Loaded {len(self.bibliography)} citation(s), style {self._style.value}")

    def _load_style(self) -> Style:
        stored = self.store.get(Config.PREFERRED_STYLE_KEY)
        if stored:
            try:
                return Style.parse(stored)
            except ValueError:
                logger.warning(f"Ignoring stored preferred style {stored!r}")
        return Style.parse(Config.DEFAULT_STYLE)

    def _save(self) -> None:
        self.store.set(Config.BIBLIOGRAPHY_KEY, self.bibliography.to_list())

    # Records

    @property
    def records(self) -> List[SourceRecord]:
        return self.bibliography.records()

    def get(self, record_id: str) -> SourceRecord:
        """
        Look up a record.

        Raises:
            RecordNotFoundError: If no record has that id
        """
        record = self.bibliography.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    def add(self, data: RecordInput) -> SourceRecord:
        """Add a record (or record dictionary) to the end of the bibliography."""
        record = self.bibliography.add(_as_record(data))
        self._save()
        log_operation("Citation added", f"{record.id} ({record.type.value})")
        return record

    def update(self, record_id: str, data: RecordInput) -> SourceRecord:
        """Replace a record as a whole, keeping its id and position."""
        record = self.bibliography.replace(record_id, _as_record(data))
        self._save()
        log_operation("Citation updated", record_id)
        return record

    def delete(self, record_id: str) -> SourceRecord:
        """Remove a record permanently."""
        record = self.bibliography.remove(record_id)
        self._save()
        log_operation("Citation deleted", record_id)
        return record

    def list_records(self, sort_by: str = "added", descending: bool = False, source_type: str = "all") -> List[SourceRecord]:
        """Records filtered by type and sorted by one column."""
        wanted = {r.id for r in self.bibliography.filter_by_type(source_type)}
        return [r for r in self.bibliography.sorted_by(sort_by, descending) if r.id in wanted]

    # Style

    @property
    def preferred_style(self) -> Style:
        return self._style

    def set_preferred_style(self, style: Union[Style, str]) -> Style:
        """
        Change and persist the preferred style.

        Raises:
            UnsupportedFormatError: If the style is not recognised
        """
        self._style = Style.parse(style)
        self.store.set(Config.PREFERRED_STYLE_KEY, self._style.value)
        log_operation("Preferred style", self._style.display_name)
        return self._style

    def _style_or_preferred(self, style) -> Style:
        return self._style if style is None else Style.parse(style)

    # Rendering

    def format_record(self, record_id: str, style=None) -> str:
        """Full reference entry for one record."""
        return format_full(self.get(record_id), self._style_or_preferred(style))

    def in_text(self, record_id: str, style=None, locator: Optional[str] = None) -> str:
        """In-text citation for one record."""
        return format_in_text(self.get(record_id), self._style_or_preferred(style), locator)

    def format_all(self, style=None) -> str:
        """Every reference entry, in order, separated by blank lines."""
        resolved = self._style_or_preferred(style)
        return "\n\n".join(format_full(record, resolved) for record in self.bibliography)

    # Export

    def export(self, export_format, style=None) -> Tuple[Union[str, bytes], str, str]:
        """
        Export the whole bibliography.

        Returns:
            Tuple of (content, default filename, MIME type)

        Raises:
            UnsupportedFormatError: If the format or style is not recognised
            EmptyCollectionError: If the bibliography is empty
        """
        resolved = self._style_or_preferred(style)
        content = exporters.encode(self.records, export_format, style=resolved)
        filename = exporters.default_filename(export_format, style=resolved)
        return content, filename, exporters.mime_type(export_format)

    def save_export(self, export_format, style=None) -> str:
        """Write an export to the export folder and return its path."""
        content, filename, _ = self.export(export_format, style)
        Config.ensure_directories_exist()
        path = Config.get_export_path(filename)

        if isinstance(content, bytes):
            with open(path, "wb") as f:
                f.write(content)
        else:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)

        logger.info(f"Bibliography exported to {os.path.abspath(path)}")
        return path

    def __len__(self) -> int:
        return len(self.bibliography)

    def __repr__(self) -> str:
        return f"ReferenceManager(citations={len(self.bibliography)}, style={self._style.value!r})"
