from abc import ABC, abstractmethod

from lotfill.logging.logger import Log


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    engine: str = ""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Decode every page of the PDF, in page order.

        Raises:
            PdfExtractionError: if the document cannot be decoded.
        """

    def extract(self, pdf_bytes: bytes) -> str:
        """Extract the document text with one line break between pages.

        Labeled lines ("DATE ENTERED:", "LOT QTY:") are matched at line
        start, so page text is never glued onto the previous page's last line.
        """
        pages = self.extract_pages(pdf_bytes)
        text = "\n".join(page.strip("\n") for page in pages).strip()
        Log.info(
            "PDF text extracted",
            engine=self.engine,
            bytes=len(pdf_bytes),
            pages=len(pages),
        )
        return text
