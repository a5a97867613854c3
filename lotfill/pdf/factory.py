from typing import ClassVar

from lotfill.config.settings import Settings
from lotfill.pdf.base import BasePdfExtractor
from lotfill.pdf.pdfplumber_adapter import PdfPlumberAdapter
from lotfill.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates the PDF text adapter named by ``settings.pdf_engine``."""

    ADAPTERS: ClassVar[dict[str, type[BasePdfExtractor]]] = {
        PdfPlumberAdapter.engine: PdfPlumberAdapter,
        PyMuPdfAdapter.engine: PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.strip().lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {sorted(cls.ADAPTERS)}"
            )
        return adapter_cls()
