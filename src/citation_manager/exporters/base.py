"""Base class for reference exporters."""
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

from ..config import Config
from ..formatting import Style
from ..models import SourceRecord


class ReferenceExporter(ABC):
    """
    Abstract base class for serialising records into an interchange format.

    Subclasses describe their file conventions through class attributes and
    implement ``export_entry`` for a single record; ``export`` joins the
    entries with ``separator`` unless a format needs a document wrapper.
    """

    format_name: str = ""
    file_extension: str = "txt"
    mime_type: str = "text/plain"
    separator: str = "\n\n"
    # Whether output depends on the citation style
    uses_style: bool = False

    def __init__(self, escape: Optional[bool] = None):
        self.escape = Config.ESCAPE_SPECIAL_CHARS if escape is None else escape

    def export(self, records: Sequence[SourceRecord], style: Optional[Style] = None) -> Union[str, bytes]:
        """Serialise records, in order, into one document."""
        return self.separator.join(self.export_entry(record, style) for record in records)

    @abstractmethod
    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        """Serialise a single record."""
        pass
