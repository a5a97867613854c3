import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lotfill.extraction import ExtractedFields, ExtractionEngine, ExtractionUnavailable, LocationEntry
from lotfill.extraction.source import DocumentLoader, SourceDocument
from lotfill.pdf.exceptions import PdfExtractionError


def _engine(text: str = "") -> tuple[ExtractionEngine, MagicMock, MagicMock]:
    pdf_extractor = MagicMock()
    pdf_extractor.extract.return_value = text
    loader = MagicMock(spec=DocumentLoader)
    loader.load.return_value = b"%PDF-1.4"
    return ExtractionEngine(pdf_extractor=pdf_extractor, loader=loader), pdf_extractor, loader


class TestExtractFields:
    def test_all_fields(self) -> None:
        engine, _, _ = _engine()
        text = (
            "QUALITY RELEASE TICKET\n"
            "DATE ENTERED: 09/18/25\n"
            "NAME: Jane Q. Inspector\n"
            "LOCATION: 058 Toluca Assembly\n"
            "LOT QTY: 3 EA"
        )

        fields = engine.extract_fields(text)

        assert fields == ExtractedFields(
            issued_date="2025-09-18",
            location=LocationEntry("058", "Toluca, MX"),
            issuer="Jane Q. Inspector",
            quantity=3,
        )
        assert fields.missing() == []

    def test_empty_text_leaves_every_field_missing(self) -> None:
        engine, _, _ = _engine()

        fields = engine.extract_fields("")

        assert fields == ExtractedFields()
        assert fields.missing() == ["issued_date", "location", "issuer", "quantity"]

    def test_misses_are_independent(self) -> None:
        engine, _, _ = _engine()

        fields = engine.extract_fields("NAME: Only Issuer\nLOT QTY: 0")

        assert fields.issuer == "Only Issuer"
        assert fields.quantity is None
        assert fields.issued_date is None
        assert fields.location is None

    def test_is_deterministic(self) -> None:
        engine, _, _ = _engine()
        text = "Sent: Thursday, September 18, 2025 11:15 AM\nLOCATION: 013"

        assert engine.extract_fields(text) == engine.extract_fields(text)


class TestExtractDocument:
    def test_loads_decodes_and_resolves(self) -> None:
        engine, pdf_extractor, loader = _engine("LOCATION: 017\nLOT QTY: 4")
        document = SourceDocument(path=Path("A123_4.pdf"))

        fields = engine.extract_document(document)

        loader.load.assert_called_once_with(document)
        pdf_extractor.extract.assert_called_once_with(b"%PDF-1.4")
        assert fields.location == LocationEntry("017", "Mt. Holly Truck Plant, Mt. Holly, NC")
        assert fields.quantity == 4

    def test_logs_missing_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        engine, _, _ = _engine("NAME: Jane\nSent: Thursday")

        with caplog.at_level(logging.INFO, logger="lotfill"):
            fields = engine.extract_document(SourceDocument(path=Path("A1.pdf")))

        assert fields.issued_date is None
        assert any(
            "missing=['issued_date', 'location', 'quantity']" in message for message in caplog.messages
        )

    def test_undecodable_pdf_is_unavailable(self) -> None:
        engine, pdf_extractor, _ = _engine()
        pdf_extractor.extract.side_effect = PdfExtractionError("broken xref")

        with pytest.raises(ExtractionUnavailable, match="broken xref"):
            engine.extract_document(SourceDocument(path=Path("lot.pdf")))

    def test_non_pdf_is_unavailable(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("LOT QTY: 3")
        engine = ExtractionEngine(pdf_extractor=MagicMock())

        with pytest.raises(ExtractionUnavailable, match="not a PDF"):
            engine.extract_document(SourceDocument(path=path))

    def test_missing_file_is_unavailable(self, tmp_path: Path) -> None:
        engine = ExtractionEngine(pdf_extractor=MagicMock())

        with pytest.raises(ExtractionUnavailable, match="Cannot read"):
            engine.extract_document(SourceDocument(path=tmp_path / "gone.pdf"))
