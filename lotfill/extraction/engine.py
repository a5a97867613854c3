from lotfill.extraction.dates import DateResolver
from lotfill.extraction.exceptions import (
    DocumentReadError,
    ExtractionUnavailable,
    UnsupportedDocumentError,
)
from lotfill.extraction.models import ExtractedFields
from lotfill.extraction.resolvers import IssuerResolver, LocationResolver, QuantityResolver
from lotfill.extraction.source import DocumentLoader, SourceDocument
from lotfill.logging.logger import Log
from lotfill.pdf.base import BasePdfExtractor
from lotfill.pdf.exceptions import PdfExtractionError


class ExtractionEngine:
    """Composes the field resolvers over one document's text."""

    def __init__(
        self,
        pdf_extractor: BasePdfExtractor,
        loader: DocumentLoader | None = None,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._loader = loader if loader is not None else DocumentLoader()
        self._dates = DateResolver()
        self._locations = LocationResolver()
        self._issuers = IssuerResolver()
        self._quantities = QuantityResolver()

    def extract_fields(self, text: str) -> ExtractedFields:
        """Resolve every field from text. Pure; a miss leaves the field None."""
        return ExtractedFields(
            issued_date=self._dates.resolve(text),
            location=self._locations.resolve(text),
            issuer=self._issuers.resolve(text),
            quantity=self._quantities.resolve(text),
        )

    def extract_document(self, document: SourceDocument) -> ExtractedFields:
        """Load, decode and resolve a document.

        Raises:
            ExtractionUnavailable: if the document text cannot be obtained.
        """
        try:
            raw_bytes = self._loader.load(document)
            text = self._pdf_extractor.extract(raw_bytes)
        except (UnsupportedDocumentError, DocumentReadError, PdfExtractionError) as exc:
            raise ExtractionUnavailable(str(exc)) from exc

        fields = self.extract_fields(text)
        Log.info(
            f"Extracted fields from {document.name}",
            issued_date=fields.issued_date,
            issuer=fields.issuer,
            location=fields.location.code if fields.location else None,
            quantity=fields.quantity,
            missing=fields.missing(),
        )
        return fields
