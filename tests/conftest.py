import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

LOT_DOCUMENT_LINES = [
    "QUALITY RELEASE TICKET",
    "DATE ENTERED: 09/18/25",
    "NAME: Jane Q. Inspector",
    "LOCATION: 058 Toluca Assembly",
    "LOT QTY: 3 EA",
]


def _pdf_with_pages(*pages: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def lot_pdf_bytes() -> bytes:
    """A single-page lot ticket carrying every labeled field."""
    return _pdf_with_pages(LOT_DOCUMENT_LINES)


@pytest.fixture()
def forwarded_pdf_bytes() -> bytes:
    """Two pages: a mail header with the date, then the ticket body."""
    return _pdf_with_pages(
        ["From: plant-qa@example.com", "Sent: Thursday, September 18, 2025 11:15 AM"],
        ["NAME: John Roe", "LOCATION: Saltillo Truck Plant, Saltillo, MX", "LOT QTY: 2"],
    )


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF with a blank page."""
    return _pdf_with_pages([])
