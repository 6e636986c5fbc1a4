"""EndNote tagged-format exporter."""
from typing import Optional

from ..formatting import Style
from ..models import SourceRecord, SourceType
from .base import ReferenceExporter

# EndNote %0 reference type codes
ENDNOTE_TYPES = {
    SourceType.ARTICLE: "0",
    SourceType.JOURNAL: "0",
    SourceType.BOOK: "6",
    SourceType.WEBSITE: "12",
}
DEFAULT_ENDNOTE_TYPE = "13"


class EndNoteExporter(ReferenceExporter):
    """``%X value`` tagged blocks, one per record."""

    format_name = "endnote"
    file_extension = "enw"
    mime_type = "text/plain"

    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        lines = [
            f"%0 {ENDNOTE_TYPES.get(record.type, DEFAULT_ENDNOTE_TYPE)}",
            f"%T {record.title}",
        ]
        lines.extend(f"%A {author}" for author in record.authors)
        if record.year:
            lines.append(f"%D {record.year}")
        if record.source:
            tag = "%J" if record.type in (SourceType.JOURNAL, SourceType.ARTICLE) else "%B"
            lines.append(f"{tag} {record.source}")
        if record.volume:
            lines.append(f"%V {record.volume}")
        if record.issue:
            lines.append(f"%N {record.issue}")
        if record.pages:
            lines.append(f"%P {record.pages}")
        if record.publisher:
            lines.append(f"%I {record.publisher}")
        if record.url:
            lines.append(f"%U {record.url}")
        return "\n".join(lines)
