"""Citation and reference formatting utilities."""
import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union

from .config import Config
from .exceptions import UnsupportedFormatError
from .models import SourceRecord, SourceType
from .name_utils import first_surname, join_authors, surname

logger = logging.getLogger(__name__)

UNSUPPORTED_STYLE = "Unsupported citation style"
NO_DATE = "n.d."


class Style(str, Enum):
    """Supported citation styles."""
    APA = "apa"
    MLA = "mla"
    CHICAGO = "chicago"
    HARVARD = "harvard"

    @classmethod
    def parse(cls, value: Union["Style", str]) -> "Style":
        """Resolve a style identifier, raising for anything unrecognised."""
        style = _resolve_style(value)
        if style is None:
            raise UnsupportedFormatError("citation style", value)
        return style

    @property
    def display_name(self) -> str:
        return STYLE_NAMES[self]


STYLE_NAMES: Dict[Style, str] = {
    Style.APA: "APA 7th Edition",
    Style.MLA: "MLA 9th Edition",
    Style.CHICAGO: "Chicago Manual",
    Style.HARVARD: "Harvard Referencing",
}


def _resolve_style(value) -> Optional[Style]:
    if isinstance(value, Style):
        return value
    try:
        return Style(str(value).strip().lower())
    except ValueError:
        return None


def italic(text: str) -> str:
    """Mark text as italic using the in-band asterisk convention."""
    return f"*{text}*"


def _with_period(text: str) -> str:
    # "Lee, A." must not become "Lee, A.."
    return text if text.endswith(".") else text + "."


def _is_journal(record: SourceRecord) -> bool:
    return record.type == SourceType.JOURNAL and bool(record.source)


########################################
# FULL REFERENCE BUILDER PER STYLE
########################################

def _apa_reference(record: SourceRecord) -> str:
    # Author (Year). Title. *Journal*, vol(issue), pages.
    out = f"{join_authors(record.authors)} ({record.year or NO_DATE}). {_with_period(record.title)}"
    if _is_journal(record):
        out += f" {italic(record.source)}"
        if record.volume:
            out += f", {record.volume}"
        if record.issue:
            out += f"({record.issue})"
        if record.pages:
            out += f", {record.pages}"
        out += "."
    elif record.type == SourceType.WEBSITE:
        if record.source:
            out += f" {italic(record.source)}."
        if record.url:
            out += f" {record.url}"
    else:
        if record.source:
            out += f" {italic(record.source)}."
        if record.publisher:
            out += f" {record.publisher}."
    return out


def _mla_reference(record: SourceRecord) -> str:
    # Author. "Title." *Journal*, vol. V, no. I, Year, pp. P.
    out = f'{_with_period(join_authors(record.authors))} "{_with_period(record.title)}"'
    if _is_journal(record):
        out += f" {italic(record.source)}"
        if record.volume:
            out += f", vol. {record.volume}"
        if record.issue:
            out += f", no. {record.issue}"
        if record.year:
            out += f", {record.year}"
        if record.pages:
            out += f", pp. {record.pages}"
        out += "."
    elif record.type == SourceType.WEBSITE:
        if record.source:
            out += f" {italic(record.source)}"
        if record.year:
            out += f", {record.year}"
        if record.url:
            out += ". Web."
    else:
        if record.source:
            out += f" {italic(record.source)}."
        if record.publisher:
            out += f" {record.publisher}"
        if record.year:
            out += f", {record.year}"
        out += "."
    return out


def _chicago_reference(record: SourceRecord) -> str:
    # Author. "Title." *Journal* V, no. I (Year): pages.
    out = f'{_with_period(join_authors(record.authors))} "{_with_period(record.title)}"'
    if _is_journal(record):
        out += f" {italic(record.source)}"
        if record.volume:
            out += f" {record.volume}"
        if record.issue:
            out += f", no. {record.issue}"
        if record.year:
            out += f" ({record.year})"
        if record.pages:
            out += f": {record.pages}"
        out += "."
    elif record.type == SourceType.WEBSITE:
        if record.source:
            out += f" {italic(record.source)}."
        if record.year:
            out += f" {record.year}."
        if record.url:
            out += f" {record.url}."
    else:
        if record.publisher:
            out += f" {record.publisher}"
        if record.year:
            out += f", {record.year}"
        out += "."
    return out


def _harvard_reference(record: SourceRecord) -> str:
    # Author (Year) 'Title', *Journal*, vol. V, no. I, pp. P.
    out = f"{join_authors(record.authors)} ({record.year or NO_DATE}) '{record.title}'"
    if _is_journal(record):
        out += f", {italic(record.source)}"
        if record.volume:
            out += f", vol. {record.volume}"
        if record.issue:
            out += f", no. {record.issue}"
        if record.pages:
            out += f", pp. {record.pages}"
        out += "."
    elif record.type == SourceType.WEBSITE:
        if record.source:
            out += f", {italic(record.source)}"
        if record.url:
            out += f", available at: {record.url}."
        else:
            out += "."
    else:
        if record.publisher:
            out += f", {record.publisher}"
        out += "."
    return out


_REFERENCE_BUILDERS: Dict[Style, Callable[[SourceRecord], str]] = {
    Style.APA: _apa_reference,
    Style.MLA: _mla_reference,
    Style.CHICAGO: _chicago_reference,
    Style.HARVARD: _harvard_reference,
}


def format_full(record: SourceRecord, style) -> str:
    """
    Build the full bibliography entry for one record in the given style.

    Never raises: absent optional fields are left out of the entry, an
    empty author list renders as "Unknown Author" and a missing year as
    "n.d." where the style prints one. An unrecognised style yields the
    "Unsupported citation style" sentinel.
    """
    resolved = _resolve_style(style)
    if resolved is None:
        logger.warning(f"Unsupported citation style requested: {style!r}")
        return UNSUPPORTED_STYLE

    if logger.isEnabledFor(logging.DEBUG):
        missing = record.missing_fields()
        if missing:
            logger.debug(f"Citation {record.id} rendered in {resolved.value} without: {', '.join(missing)}")

    return _REFERENCE_BUILDERS[resolved](record)


########################################
# IN-TEXT CITATION PER STYLE
########################################

def _in_text_locator(record: SourceRecord, locator: Optional[str]) -> str:
    # A start-end range is the extent of the whole work, not a pinpoint
    if locator is not None:
        return str(locator).strip()
    start, end = record.page_range
    return start if end is None else ""


def format_in_text(record: SourceRecord, style, locator: Optional[str] = None) -> str:
    """
    Build the short parenthetical citation for one record.

    APA:     (Surname, 2021, p. 5) / (A & B, 2021) / (A et al., 2021)
    MLA:     (Surname 5) / (Surname)
    Chicago: (Surname 2021, 5)
    Harvard: (Surname 2021: 5)

    The page part comes from ``locator`` when given, otherwise from
    ``record.pages`` when it names a single page. Page ranges are left out.
    """
    resolved = _resolve_style(style)
    if resolved is None:
        return UNSUPPORTED_STYLE

    authors = record.authors
    name = first_surname(authors)
    year = record.year or NO_DATE
    pages = _in_text_locator(record, locator)

    if resolved == Style.APA:
        if len(authors) == 2:
            name = f"{name} & {surname(authors[1])}"
        elif len(authors) > 2:
            name = f"{name} et al."
        return f"({name}, {year}, p. {pages})" if pages else f"({name}, {year})"

    if resolved == Style.MLA:
        return f"({name} {pages})" if pages else f"({name})"

    if resolved == Style.CHICAGO:
        return f"({name} {year}, {pages})" if pages else f"({name} {year})"

    return f"({name} {year}: {pages})" if pages else f"({name} {year})"


class CitationFormatter:
    """Format citations and references in one style."""

    def __init__(self, style=None):
        self.style = Style.parse(style if style is not None else Config.DEFAULT_STYLE)

    def reference_entry(self, record: SourceRecord) -> str:
        """Generate full reference entry."""
        return format_full(record, self.style)

    def in_text_citation(self, record: SourceRecord, locator: Optional[str] = None) -> str:
        """Generate in-text citation."""
        return format_in_text(record, self.style, locator)

    def bibliography(self, records: Iterable[SourceRecord]) -> List[str]:
        """Full reference entries for each record, in the given order."""
        return [self.reference_entry(r) for r in records]

    def __repr__(self) -> str:
        return f"CitationFormatter(style={self.style.value!r})"
