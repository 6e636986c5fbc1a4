"""RIS (Research Information Systems) exporter."""
from typing import List, Optional

from ..formatting import Style
from ..models import SourceRecord, SourceType
from .base import ReferenceExporter

RIS_TYPES = {
    SourceType.ARTICLE: "JOUR",
    SourceType.JOURNAL: "JOUR",
    SourceType.BOOK: "BOOK",
    SourceType.WEBSITE: "ELEC",
}


def ris_line(tag: str, value: str) -> str:
    """Format a ``TAG  - value`` line."""
    return f"{tag}  - {value}"


class RISExporter(ReferenceExporter):
    """
    Tagged-line blocks readable by EndNote, Zotero and Mendeley.

    ``pages`` is split on its hyphen into SP/EP; a single page produces an
    SP line only.
    """

    format_name = "ris"
    file_extension = "ris"
    mime_type = "application/x-research-info-systems"

    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        lines: List[str] = [
            ris_line("TY", RIS_TYPES.get(record.type, "GEN")),
            ris_line("TI", record.title),
        ]
        lines.extend(ris_line("AU", author) for author in record.authors)

        if record.year:
            lines.append(ris_line("PY", record.year))
        if record.source:
            tag = "JO" if record.type in (SourceType.JOURNAL, SourceType.ARTICLE) else "T2"
            lines.append(ris_line(tag, record.source))
        if record.volume:
            lines.append(ris_line("VL", record.volume))
        if record.issue:
            lines.append(ris_line("IS", record.issue))
        if record.pages:
            start, end = record.page_range
            lines.append(ris_line("SP", start))
            if end is not None:
                lines.append(ris_line("EP", end))
        if record.publisher:
            lines.append(ris_line("PB", record.publisher))
        if record.url:
            lines.append(ris_line("UR", record.url))
        if record.doi:
            lines.append(ris_line("DO", record.doi))
        if record.date_accessed and record.type == SourceType.WEBSITE:
            lines.append(ris_line("Y2", record.date_accessed))

        lines.append(ris_line("ER", ""))
        return "\n".join(lines)
