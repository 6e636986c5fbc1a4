"""Plain-text and RTF bibliography exporters."""
import re
from typing import Optional, Sequence

from ..config import Config
from ..formatting import Style, format_full
from ..models import SourceRecord
from .base import ReferenceExporter

RTF_HEADER = "{\\rtf1\\ansi\\deff0 {\\fonttbl {\\f0 Times New Roman;}}\n\\f0\\fs24\n"
RTF_FOOTER = "\n}"


def escape_rtf(text: str) -> str:
    r"""Escape RTF control characters and encode non-ASCII as \uN? sequences."""
    text = re.sub(r"([\\{}])", r"\\\1", text)
    return "".join(ch if ord(ch) < 128 else f"\\u{_rtf_codepoint(ch)}?" for ch in text)


def _rtf_codepoint(ch: str) -> int:
    # RTF \u takes a signed 16-bit value
    code = ord(ch)
    if code > 0xFFFF:
        code = 0x3F  # '?'
    return code - 0x10000 if code > 0x7FFF else code


class TextExporter(ReferenceExporter):
    """Full citations in the chosen style, separated by blank lines."""

    format_name = "text"
    file_extension = "txt"
    mime_type = "text/plain"
    uses_style = True

    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        return format_full(record, style or Config.DEFAULT_STYLE)


class RTFExporter(TextExporter):
    """
    The plain-text bibliography wrapped in a minimal RTF document.

    Line breaks become ``\\par`` paragraph breaks. Braces and backslashes in
    citation text are only escaped when escaping is enabled.
    """

    format_name = "rtf"
    file_extension = "rtf"
    mime_type = "application/rtf"

    def export(self, records: Sequence[SourceRecord], style: Optional[Style] = None) -> str:
        text = super().export(records, style)
        if self.escape:
            text = escape_rtf(text)
        body = text.replace("\n", "\\par\n")
        return f"{RTF_HEADER}{body}{RTF_FOOTER}"
