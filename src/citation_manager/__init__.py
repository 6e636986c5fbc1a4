"""Citation formatting and bibliography export package."""
from .bibliography import Bibliography
from .config import Config
from .exceptions import (
    CitationError,
    EmptyCollectionError,
    RecordNotFoundError,
    UnsupportedFormatError,
    ValidationError,
)
from .exporters import ExportFormat, default_filename, encode
from .formatting import CitationFormatter, Style, format_full, format_in_text
from .keys import citation_key
from .models import SourceRecord, SourceType
from .reference_manager import ReferenceManager
from .storage import JsonFileStore, KeyValueStore, MemoryStore

__version__ = "1.0.0"
__all__ = [
    "Bibliography",
    "CitationError",
    "CitationFormatter",
    "Config",
    "EmptyCollectionError",
    "ExportFormat",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "RecordNotFoundError",
    "ReferenceManager",
    "SourceRecord",
    "SourceType",
    "Style",
    "UnsupportedFormatError",
    "ValidationError",
    "citation_key",
    "default_filename",
    "encode",
    "format_full",
    "format_in_text",
]
