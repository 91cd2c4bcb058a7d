# PDF module
from beaverdoc.pdf.stamp import (
    PDFStamper,
    get_pdf_stamper,
    FooterStyle,
    FooterMetadata,
    build_footer_text,
    centered_x,
    StampingError,
    StampingCancelled,
)

__all__ = [
    "PDFStamper",
    "get_pdf_stamper",
    "FooterStyle",
    "FooterMetadata",
    "build_footer_text",
    "centered_x",
    "StampingError",
    "StampingCancelled",
]
