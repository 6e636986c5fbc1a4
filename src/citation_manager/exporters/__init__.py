"""
Bibliography exporters.

``encode`` serialises an ordered collection of records into one of the
supported interchange formats. Each format lives in its own module behind
the ``ReferenceExporter`` base class; ``EXPORTERS`` maps format ids to them.
"""
import logging
from datetime import date
from enum import Enum
from typing import Dict, Iterable, Optional, Type, Union

from ..config import Config
from ..exceptions import EmptyCollectionError, UnsupportedFormatError
from ..formatting import Style
from ..models import SourceRecord
from ..utils.error_handling import log_errors
from .base import ReferenceExporter
from .bibtex_exporter import BibTeXExporter
from .csv_exporter import CSVExporter
from .docx_exporter import DocxExporter
from .endnote_exporter import EndNoteExporter
from .rdf_exporter import MendeleyExporter, ZoteroRDFExporter
from .ris_exporter import RISExporter
from .text_exporter import RTFExporter, TextExporter

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    """Supported export formats."""
    TEXT = "text"
    RTF = "rtf"
    CSV = "csv"
    BIBTEX = "bibtex"
    RIS = "ris"
    ENDNOTE = "endnote"
    ZOTERO = "zotero"
    MENDELEY = "mendeley"
    DOCX = "docx"

    @classmethod
    def parse(cls, value: Union["ExportFormat", str]) -> "ExportFormat":
        """Resolve a format identifier, raising for anything unrecognised."""
        if isinstance(value, ExportFormat):
            return value
        key = str(value).strip().lower()
        try:
            return cls(_FORMAT_ALIASES.get(key, key))
        except ValueError:
            raise UnsupportedFormatError("export format", value) from None


# File extensions and common names accepted as format ids
_FORMAT_ALIASES = {
    "txt": "text",
    "plain": "text",
    "bib": "bibtex",
    "enw": "endnote",
    "rdf": "zotero",
}

EXPORTERS: Dict[ExportFormat, Type[ReferenceExporter]] = {
    ExportFormat.TEXT: TextExporter,
    ExportFormat.RTF: RTFExporter,
    ExportFormat.CSV: CSVExporter,
    ExportFormat.BIBTEX: BibTeXExporter,
    ExportFormat.RIS: RISExporter,
    ExportFormat.ENDNOTE: EndNoteExporter,
    ExportFormat.ZOTERO: ZoteroRDFExporter,
    ExportFormat.MENDELEY: MendeleyExporter,
    ExportFormat.DOCX: DocxExporter,
}


def get_exporter(export_format, escape: Optional[bool] = None) -> ReferenceExporter:
    """Factory to get the exporter for a format id."""
    return EXPORTERS[ExportFormat.parse(export_format)](escape=escape)


@log_errors("Export")
def encode(
    records: Iterable[SourceRecord],
    export_format,
    style=None,
    escape: Optional[bool] = None,
) -> Union[str, bytes]:
    """
    Serialise records into a single document.

    Args:
        records: Records in output order
        export_format: An ExportFormat or its id ("bibtex", "ris", ...)
        style: Citation style for text, RTF and Word output; defaults to
            Config.DEFAULT_STYLE and is ignored by the other formats
        escape: Override Config.ESCAPE_SPECIAL_CHARS

    Returns:
        The document as text, or bytes for Word output

    Raises:
        UnsupportedFormatError: If the format (or a required style) is unknown
        EmptyCollectionError: If there are no records
    """
    exporter = get_exporter(export_format, escape=escape)
    records = list(records)
    if not records:
        raise EmptyCollectionError()

    resolved_style = None
    if exporter.uses_style:
        resolved_style = Style.parse(style if style is not None else Config.DEFAULT_STYLE)

    content = exporter.export(records, resolved_style)
    logger.info(f"Exported {len(records)} citation(s) as {exporter.format_name}")
    return content


def file_extension(export_format) -> str:
    return EXPORTERS[ExportFormat.parse(export_format)].file_extension


def mime_type(export_format) -> str:
    return EXPORTERS[ExportFormat.parse(export_format)].mime_type


def default_filename(export_format, style=None, on: Optional[date] = None) -> str:
    """
    Default download name: ``bibliography-<style-or-format>-<ISO-date>.<ext>``.

    Style-dependent formats are labelled with the style, the rest with the
    format id.
    """
    fmt = ExportFormat.parse(export_format)
    exporter_cls = EXPORTERS[fmt]
    if exporter_cls.uses_style:
        label = Style.parse(style if style is not None else Config.DEFAULT_STYLE).value
    else:
        label = fmt.value
    day = (on or date.today()).isoformat()
    return f"bibliography-{label}-{day}.{exporter_cls.file_extension}"


__all__ = [
    "ExportFormat",
    "EXPORTERS",
    "ReferenceExporter",
    "encode",
    "get_exporter",
    "file_extension",
    "mime_type",
    "default_filename",
]
