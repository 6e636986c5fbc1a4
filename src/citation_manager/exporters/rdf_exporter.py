"""Zotero RDF and Mendeley text exporters."""
import xml.etree.ElementTree as ET
from typing import List, Optional, Sequence

from ..formatting import Style
from ..models import SourceRecord, SourceType
from .base import ReferenceExporter

NAMESPACES = {
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "dc": "http://purl.org/dc/elements/1.1/",
    "z": "http://www.zotero.org/namespaces/export#",
    "bib": "http://purl.org/net/biblio#",
}

for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)

ZOTERO_ITEM_TYPES = {
    SourceType.ARTICLE: "journalArticle",
    SourceType.JOURNAL: "journalArticle",
    SourceType.BOOK: "book",
    SourceType.WEBSITE: "webpage",
}

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _q(prefix: str, tag: str) -> str:
    return f"{{{NAMESPACES[prefix]}}}{tag}"


def _add(parent: ET.Element, prefix: str, tag: str, text: str) -> None:
    if text:
        ET.SubElement(parent, _q(prefix, tag)).text = text


class ZoteroRDFExporter(ReferenceExporter):
    """
    RDF/XML with one ``rdf:Description`` per record.

    Element text is XML-escaped by ElementTree regardless of the escaping
    setting, since unescaped markup would not be well-formed.
    """

    format_name = "zotero"
    file_extension = "rdf"
    mime_type = "application/rdf+xml"

    def _description(self, record: SourceRecord) -> ET.Element:
        desc = ET.Element(_q("rdf", "Description"), {_q("rdf", "about"): f"#{record.id}"})
        _add(desc, "z", "itemType", ZOTERO_ITEM_TYPES.get(record.type, "document"))
        _add(desc, "dc", "title", record.title)
        for author in record.authors:
            _add(desc, "dc", "creator", author)
        _add(desc, "dc", "date", record.year)
        _add(desc, "dc", "source", record.source)
        _add(desc, "dc", "type", record.type.value)
        if record.doi:
            _add(desc, "dc", "identifier", f"DOI {record.doi}")
        _add(desc, "dc", "identifier", record.url)
        _add(desc, "dc", "publisher", record.publisher)
        if record.pages:
            start, end = record.page_range
            # An explicit end page is required here; single pages repeat the start
            _add(desc, "bib", "pages", f"{start}-{end or start}")
        return desc

    def export(self, records: Sequence[SourceRecord], style: Optional[Style] = None) -> str:
        root = ET.Element(_q("rdf", "RDF"))
        for record in records:
            root.append(self._description(record))
        ET.indent(root, space="  ")
        return XML_DECLARATION + ET.tostring(root, encoding="unicode")

    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        return ET.tostring(self._description(record), encoding="unicode")


class MendeleyExporter(ReferenceExporter):
    """Labeled ``Field: value`` blocks separated by ``---`` lines."""

    format_name = "mendeley"
    file_extension = "txt"
    mime_type = "text/plain"
    separator = "\n---\n"

    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        fields: List[tuple] = [
            ("Title", record.title),
            ("Authors", "; ".join(record.authors)),
            ("Year", record.year),
            ("Source", record.source),
            ("Type", record.type.value),
            ("Volume", record.volume),
            ("Issue", record.issue),
            ("Pages", record.pages),
            ("Publisher", record.publisher),
            ("DOI", record.doi),
            ("URL", record.url),
            ("Accessed", record.date_accessed),
        ]
        return "\n".join(f"{label}: {value}" for label, value in fields if value)
