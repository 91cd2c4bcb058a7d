"""
Pytest configuration and fixtures.
"""
import os
import sys

import fitz  # PyMuPDF
import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from beaverdoc.config import Settings, get_settings  # noqa: E402
from beaverdoc.main import app  # noqa: E402
from beaverdoc.storage import MemStorage, get_storage  # noqa: E402


def build_pdf(page_count: int = 1, width: float = 595, height: float = 842) -> bytes:
    """Create a PDF with one line of body text per page."""
    doc = fitz.open()
    try:
        for i in range(page_count):
            page = doc.new_page(width=width, height=height)
            page.insert_text((50, 100), f"Body text of page {i + 1}", fontsize=12)
        return doc.tobytes()
    finally:
        doc.close()


def footer_lines(pdf_bytes: bytes, label: str = "BeaverDoc") -> list:
    """Footer lines per page, extracted from a stamped PDF."""
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        return [
            [line for line in page.get_text().splitlines() if line.startswith(label)]
            for page in doc
        ]
    finally:
        doc.close()


@pytest.fixture
def make_pdf():
    """Factory fixture: make_pdf(page_count, width=..., height=...) -> bytes."""
    return build_pdf


@pytest.fixture
def sample_pdf():
    """A one-page A4 PDF."""
    return build_pdf(1)


@pytest.fixture
def settings():
    """Settings for tests, independent of the environment."""
    return Settings(
        ENVIRONMENT="test",
        MAX_UPLOAD_BYTES=1024 * 1024,
        STAMP_LOCALE="fr",
        STAMP_TIMEZONE="Europe/Paris",
    )


@pytest.fixture
def storage():
    """Fresh in-memory storage."""
    return MemStorage()


@pytest.fixture
def client(storage, settings):
    """API client bound to a fresh storage."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def uploaded_document(client, sample_pdf):
    """Upload the sample PDF and return the JSON response body."""
    response = client.post(
        "/api/documents/upload",
        files={"file": ("contract.pdf", sample_pdf, "application/pdf")},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def extract_footers():
    """Function fixture: extract_footers(pdf_bytes) -> footer lines per page."""
    return footer_lines
