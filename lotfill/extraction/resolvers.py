import re
from typing import ClassVar

from lotfill.extraction.base import BaseResolver, labeled_remainder
from lotfill.extraction.exceptions import ParseMiss
from lotfill.extraction.locations import iter_locations, location_for_code
from lotfill.extraction.models import LocationEntry


class LocationResolver(BaseResolver[LocationEntry]):
    """Maps the ``LOCATION:`` line to a lookup-table entry.

    A known 3-digit code wins over any label text on the same line; otherwise
    the first table entry whose label appears in the line is used.
    """

    field = "location"

    _LABEL_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"^\s*LOCATION\s*:?\s*(.+)$", re.IGNORECASE | re.MULTILINE
    )
    _CODE_RE: ClassVar[re.Pattern[str]] = re.compile(r"\b(\d{3})\b")

    def parse(self, text: str) -> LocationEntry:
        raw = labeled_remainder(self._LABEL_RE, text, self.field)

        code_match = self._CODE_RE.search(raw)
        if code_match:
            entry = location_for_code(code_match.group(1))
            if entry is not None:
                return entry

        lowered = raw.lower()
        for entry in iter_locations():
            if entry.label.lower() in lowered:
                return entry
        raise ParseMiss(self.field, f"unknown location '{raw}'")


class IssuerResolver(BaseResolver[str]):
    """Issuer name from the ``NAME:`` line, kept verbatim."""

    field = "issuer"

    _LABEL_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"^\s*NAME\s*:?\s*(.+)$", re.IGNORECASE | re.MULTILINE
    )

    def parse(self, text: str) -> str:
        return labeled_remainder(self._LABEL_RE, text, self.field)


class QuantityResolver(BaseResolver[int]):
    """Lot count from the ``LOT QTY:`` line (``LOT QTY : 2 EA``)."""

    field = "quantity"

    _LABEL_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"^\s*LOT\s+QTY\s*:?\s*(\d+)", re.IGNORECASE | re.MULTILINE
    )

    def parse(self, text: str) -> int:
        quantity = int(labeled_remainder(self._LABEL_RE, text, self.field))
        if quantity <= 0:
            raise ParseMiss(self.field, f"non-positive quantity {quantity}")
        return quantity
