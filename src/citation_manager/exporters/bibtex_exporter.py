"""BibTeX exporter."""
import re
from typing import List, Optional, Tuple

from ..formatting import Style
from ..keys import citation_key
from ..models import SourceRecord, SourceType
from .base import ReferenceExporter

BIBTEX_TYPES = {
    SourceType.ARTICLE: "article",
    SourceType.JOURNAL: "article",
    SourceType.BOOK: "book",
    SourceType.WEBSITE: "misc",
}

_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
}
_LATEX_PATTERN = re.compile(r"[\\{}&%$#_]")


def escape_bibtex(value: str) -> str:
    """Escape LaTeX special characters in a free-text field value."""
    return _LATEX_PATTERN.sub(lambda m: _LATEX_SPECIALS[m.group(0)], value)


class BibTeXExporter(ReferenceExporter):
    """One ``@type{key, field={value}, ...}`` block per record."""

    format_name = "bibtex"
    file_extension = "bib"
    mime_type = "text/plain"

    def _text(self, value: str) -> str:
        return escape_bibtex(value) if self.escape else value

    def _fields(self, record: SourceRecord) -> List[Tuple[str, str]]:
        fields = [("title", self._text(record.title))]
        if record.authors:
            fields.append(("author", " and ".join(self._text(a) for a in record.authors)))
        if record.year:
            fields.append(("year", record.year))

        if record.type in (SourceType.JOURNAL, SourceType.ARTICLE):
            if record.source:
                fields.append(("journal", self._text(record.source)))
            if record.volume:
                fields.append(("volume", record.volume))
            if record.issue:
                fields.append(("number", record.issue))
            if record.pages:
                fields.append(("pages", record.pages))
        elif record.type == SourceType.BOOK:
            if record.publisher:
                fields.append(("publisher", self._text(record.publisher)))
        elif record.type == SourceType.WEBSITE:
            if record.url or record.source:
                fields.append(("howpublished", f"\\url{{{record.url or record.source}}}"))
            if record.date_accessed:
                fields.append(("note", f"Accessed: {record.date_accessed}"))

        if record.url:
            fields.append(("url", record.url))
        if record.doi:
            fields.append(("doi", record.doi))
        return fields

    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        entry_type = BIBTEX_TYPES.get(record.type, "misc")
        entry = [f"@{entry_type}{{{citation_key(record)},"]
        entry.extend(f"  {name}={{{value}}}," for name, value in self._fields(record))

        # Remove trailing comma from last field
        entry[-1] = entry[-1][:-1]
        entry.append("}")
        return "\n".join(entry)
