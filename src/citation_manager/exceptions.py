"""Error types raised by the citation manager."""


class CitationError(Exception):
    """Base class for citation manager errors."""


class ValidationError(CitationError, ValueError):
    """Raised when record data or an export request is invalid."""


class EmptyCollectionError(ValidationError):
    """Raised when an export is requested for an empty record collection."""

    def __init__(self, message: str = "No citations to export"):
        super().__init__(message)


class UnsupportedFormatError(CitationError, ValueError):
    """Raised when a format or style identifier is not recognised."""

    def __init__(self, kind: str, value):
        self.kind = kind
        self.value = value
        super().__init__(f"Unsupported {kind}: {value}")


class RecordNotFoundError(CitationError, KeyError):
    """Raised when a record id is not present in the bibliography."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Citation '{record_id}' not found")

    def __str__(self) -> str:
        return self.args[0]
