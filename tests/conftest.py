import base64
import io

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from yachtscan.extraction.models import ExtractionRequest, FileAnalysisResult


@pytest.fixture()
def certificate_pdf_bytes() -> bytes:
    """Single-page PDF with a registration certificate text layer."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.drawString(72, 780, "Certificate of MALTA Registry")
    c.drawString(72, 760, "Name of Ship: SERENITY")
    c.drawString(72, 740, "Official No. 23456")
    c.drawString(72, 720, "Length overall: 32.5")
    c.drawString(72, 700, "Call Sign: 9HA1234")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Valid PDF with no text content (blank page), like a scanned certificate."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def pdf_request() -> ExtractionRequest:
    return ExtractionRequest(
        file_base64=base64.b64encode(b"%PDF-1.4\n% registration scan\n").decode("ascii"),
        file_name="registration_certificate.pdf",
        mime_type="application/pdf",
    )


@pytest.fixture()
def certificate_analysis() -> FileAnalysisResult:
    return FileAnalysisResult(
        mime_type="application/pdf",
        category="yacht_certificate",
        quality="medium",
        size_bytes=2048,
        preprocessing_steps=["yacht_certificate_optimization"],
        recommendations=[
            "use_yacht_certificate_patterns",
            "emphasize_pattern_recognition",
            "extract_text_layers",
        ],
    )
