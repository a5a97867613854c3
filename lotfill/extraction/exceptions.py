class ExtractionError(Exception):
    """Base exception for field extraction."""


class ParseMiss(ExtractionError):
    """Raised when a resolver finds no usable value. Never fatal."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class ExtractionUnavailable(ExtractionError):
    """Raised when the document text could not be obtained at all."""


class UnsupportedDocumentError(ExtractionError):
    """Raised when a source document is not a PDF."""


class DocumentReadError(ExtractionError):
    """Raised when a source document cannot be read from disk."""
