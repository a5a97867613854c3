from lotfill.extraction.engine import ExtractionEngine
from lotfill.extraction.exceptions import ExtractionUnavailable, ParseMiss
from lotfill.extraction.models import ExtractedFields, LocationEntry
from lotfill.extraction.source import SourceDocument

__all__ = [
    "ExtractedFields",
    "ExtractionEngine",
    "ExtractionUnavailable",
    "LocationEntry",
    "ParseMiss",
    "SourceDocument",
]
