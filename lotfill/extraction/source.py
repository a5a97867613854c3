import re
from dataclasses import dataclass
from pathlib import Path

from lotfill.extraction.exceptions import DocumentReadError, UnsupportedDocumentError

_PDF_SUFFIX_RE = re.compile(r"\.pdf$", re.IGNORECASE)


def base_name_from_filename(filename: str, underscore_to_slash: bool = False) -> str:
    """Batch base name: the file name without ``.pdf``.

    Scanned lot numbers like ``A123_4`` stand for ``A123/4``; when enabled,
    only the first underscore is turned back into a slash.
    """
    base = _PDF_SUFFIX_RE.sub("", filename)
    if underscore_to_slash:
        base = base.replace("_", "/", 1)
    return base


@dataclass(frozen=True)
class SourceDocument:
    """A local document chosen by the operator."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


class DocumentLoader:
    """Reads the bytes of a source document from the local filesystem."""

    def load(self, document: SourceDocument) -> bytes:
        """Read document bytes from disk.

        Raises:
            UnsupportedDocumentError: if the file is not a PDF.
            DocumentReadError: if the file is missing or unreadable.
        """
        if not _PDF_SUFFIX_RE.search(document.name):
            raise UnsupportedDocumentError(f"'{document.name}' is not a PDF document")
        try:
            return document.path.read_bytes()
        except OSError as exc:
            raise DocumentReadError(f"Cannot read {document.path}: {exc}") from exc
