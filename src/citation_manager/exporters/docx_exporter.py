"""Word (.docx) bibliography exporter."""
import io
import re
from typing import Iterator, Optional, Sequence, Tuple

from docx import Document
from docx.shared import Pt

from ..config import Config
from ..formatting import Style, format_full
from ..models import SourceRecord
from .base import ReferenceExporter

_ITALIC_PATTERN = re.compile(r"\*([^*]+)\*")


def split_italics(text: str) -> Iterator[Tuple[str, bool]]:
    """Split ``*marked*`` text into (segment, is_italic) runs."""
    pos = 0
    for match in _ITALIC_PATTERN.finditer(text):
        if match.start() > pos:
            yield text[pos:match.start()], False
        yield match.group(1), True
        pos = match.end()
    if pos < len(text):
        yield text[pos:], False


class DocxExporter(ReferenceExporter):
    """A Word document with one paragraph per full citation."""

    format_name = "docx"
    file_extension = "docx"
    mime_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    uses_style = True

    def export(self, records: Sequence[SourceRecord], style: Optional[Style] = None) -> bytes:
        doc = Document()
        doc.add_heading("References", level=1)

        for record in records:
            p = doc.add_paragraph()
            for segment, is_italic in split_italics(self.export_entry(record, style)):
                run = p.add_run(segment)
                if is_italic:
                    run.italic = True
            p.paragraph_format.space_after = Pt(12)

        # Save to a BytesIO object
        f = io.BytesIO()
        doc.save(f)
        return f.getvalue()

    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        return format_full(record, style or Config.DEFAULT_STYLE)
