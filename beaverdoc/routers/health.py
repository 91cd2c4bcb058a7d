"""
Health check endpoints for diagnosing the stamping pipeline.
"""
import time

import fitz  # PyMuPDF
from fastapi import APIRouter

from beaverdoc.models import StamperHealthResponse
from beaverdoc.pdf import get_pdf_stamper

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


def _build_selftest_pdf() -> bytes:
    doc = fitz.open()
    try:
        page = doc.new_page(width=595, height=842)  # A4
        page.insert_text((72, 72), "BeaverDoc stamping self-test", fontsize=12)
        return doc.tobytes()
    finally:
        doc.close()


def _run_stamper_selftest(steps: list) -> None:
    pdf_bytes = _build_selftest_pdf()
    steps.append(f"Created self-test PDF: {len(pdf_bytes)} bytes")

    stamped = get_pdf_stamper().stamp(
        pdf_bytes, "UID-HEALTHCHECK", "DOC-HEALTHCHECK", signature_info="Self-test"
    )
    steps.append(f"Stamped PDF: {len(stamped)} bytes")

    doc = fitz.open(stream=stamped, filetype="pdf")
    try:
        text = doc[0].get_text()
    finally:
        doc.close()
    if "UID-HEALTHCHECK" not in text:
        raise RuntimeError("Footer not found in stamped output")
    steps.append("Footer found in stamped output")


@router.get("/stamper", response_model=StamperHealthResponse)
async def test_stamper():
    """
    Stamp a generated one-page PDF and check the footer is readable.
    Useful for diagnosing PyMuPDF / font issues.
    """
    start_time = time.time()
    result = {
        "success": False,
        "duration_seconds": 0,
        "steps": [],
        "error": None,
    }

    try:
        _run_stamper_selftest(result["steps"])
        result["success"] = True
    except Exception as e:
        result["error"] = str(e)
        result["steps"].append(f"ERROR: {type(e).__name__}")
    finally:
        result["duration_seconds"] = round(time.time() - start_time, 3)

    return result
