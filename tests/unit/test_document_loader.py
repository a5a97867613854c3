from pathlib import Path

import pytest

from lotfill.extraction.exceptions import DocumentReadError, UnsupportedDocumentError
from lotfill.extraction.source import DocumentLoader, SourceDocument, base_name_from_filename


class TestBaseNameFromFilename:
    def test_strips_pdf_suffix(self) -> None:
        assert base_name_from_filename("A123_4.pdf") == "A123_4"

    def test_suffix_is_case_insensitive(self) -> None:
        assert base_name_from_filename("LOT-77.PDF") == "LOT-77"

    def test_only_trailing_suffix(self) -> None:
        assert base_name_from_filename("a.pdf.bak") == "a.pdf.bak"

    def test_first_underscore_becomes_slash_when_enabled(self) -> None:
        assert base_name_from_filename("A123_4_b.pdf", underscore_to_slash=True) == "A123/4_b"

    def test_no_underscore(self) -> None:
        assert base_name_from_filename("A1234.pdf", underscore_to_slash=True) == "A1234"


class TestDocumentLoader:
    def test_reads_bytes(self, tmp_path: Path, lot_pdf_bytes: bytes) -> None:
        path = tmp_path / "lot.pdf"
        path.write_bytes(lot_pdf_bytes)

        assert DocumentLoader().load(SourceDocument(path=path)) == lot_pdf_bytes

    def test_upper_case_suffix_is_a_pdf(self, tmp_path: Path) -> None:
        path = tmp_path / "LOT.PDF"
        path.write_bytes(b"%PDF-1.4")

        assert DocumentLoader().load(SourceDocument(path=path)) == b"%PDF-1.4"

    def test_rejects_other_types(self, tmp_path: Path) -> None:
        path = tmp_path / "scan.png"
        path.write_bytes(b"\x89PNG")

        with pytest.raises(UnsupportedDocumentError):
            DocumentLoader().load(SourceDocument(path=path))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentReadError):
            DocumentLoader().load(SourceDocument(path=tmp_path / "missing.pdf"))

    def test_name_is_file_name(self) -> None:
        assert SourceDocument(path=Path("/tmp/in/A1_2.pdf")).name == "A1_2.pdf"
