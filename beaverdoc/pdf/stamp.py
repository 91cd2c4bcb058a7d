"""
PDF footer stamping using PyMuPDF (fitz).
Overlays a single traceability line (UID, token, page position and optional
signature/timestamp) near the bottom edge of every page.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Optional, Tuple

import fitz  # PyMuPDF

from beaverdoc.utils.datetime_utils import utc_now, format_timestamp
from beaverdoc.utils.logging import fingerprint

logger = logging.getLogger(__name__)

FOOTER_DELIMITER = " | "
TIMESTAMP_PREFIX = "Horodaté le"
STAMP_FAILED_MESSAGE = "Unable to stamp document"


@dataclass(frozen=True)
class FooterStyle:
    """
    Immutable rendering parameters shared by all stamping calls.

    PyMuPDF coordinates: origin at top-left, Y increases downward.
    bottom_margin is measured upward from the bottom edge to the baseline.
    """
    label: str = "BeaverDoc"
    font_name: str = "helv"  # Base-14 Helvetica
    font_size: float = 6.0
    bottom_margin: float = 10.0
    color: Tuple[float, float, float] = (0.7, 0.7, 0.7)  # Pale gray
    opacity: float = 0.5
    locale: str = "fr"
    timezone: Optional[str] = "Europe/Paris"


@dataclass
class FooterMetadata:
    """Traceability fields rendered on one page."""
    uid: str
    token: str
    page_index: int  # 1-indexed
    page_count: int
    signature_info: Optional[str] = None
    timestamp: Optional[str] = None
    label: str = "BeaverDoc"

    @property
    def text(self) -> str:
        return build_footer_text(
            label=self.label,
            uid=self.uid,
            token=self.token,
            page_number=self.page_index,
            page_count=self.page_count,
            signature_info=self.signature_info,
            timestamp=self.timestamp,
        )


def build_footer_text(
    label: str,
    uid: str,
    token: str,
    page_number: int,
    page_count: int,
    signature_info: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> str:
    """
    Compose the single-line footer.

    Without signature info:
        "BeaverDoc - UID: <uid> | Token: <token> | Page 2/3"
    With signature info, two more fields are appended:
        "... | Page 2/3 | Signed by Alice | Horodaté le 17/10/2026 14:03:22"
    """
    parts = [f"{label} - UID: {uid}", f"Token: {token}", f"Page {page_number}/{page_count}"]
    if signature_info:
        parts.append(signature_info)
        parts.append(f"{TIMESTAMP_PREFIX} {timestamp or ''}".rstrip())
    return FOOTER_DELIMITER.join(parts)


def centered_x(page_width: float, text_width: float) -> float:
    """Left edge that centers text horizontally. May be negative for narrow pages."""
    return (page_width - text_width) / 2


class StampingError(Exception):
    """
    Stamping failed. The message is always generic; the underlying
    cause is chained as __cause__ and logged.
    """

    def __init__(self, message: str = STAMP_FAILED_MESSAGE):
        super().__init__(message)
        self.message = message


class StampingCancelled(StampingError):
    """Stamping aborted by the caller before all pages were processed."""

    def __init__(self):
        super().__init__("Stamping cancelled")


class ParseError(Exception):
    """Input bytes are not a usable PDF document."""
    pass


class RenderError(Exception):
    """Font resolution, text measurement or drawing failed."""
    pass


class SerializationError(Exception):
    """Writing the modified document failed."""
    pass


class PDFStamper:
    """Traceability footer overlay using PyMuPDF."""

    def __init__(self, style: Optional[FooterStyle] = None):
        self.style = style or FooterStyle()

    def stamp(
        self,
        pdf_bytes: bytes,
        uid: str,
        token: str,
        signature_info: Optional[str] = None,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        """
        Add the traceability footer to every page of a PDF.

        Args:
            pdf_bytes: Original PDF content (not modified)
            uid: Document unique identifier, rendered verbatim
            token: Document tracking token, rendered verbatim
            signature_info: Optional signature text; when given, a timestamp
                is rendered after it
            now: Moment used for the timestamp (defaults to current UTC time)
            cancel_event: Checked before each page; when set, stamping aborts

        Returns:
            New PDF bytes, same page count, one more footer line per page

        Raises:
            StampingCancelled: If cancel_event was set
            StampingError: If the document cannot be parsed, drawn or saved
        """
        token_fp = fingerprint(token, "tok_")
        try:
            return self._stamp(pdf_bytes, uid, token, signature_info, now, cancel_event)
        except StampingCancelled:
            logger.info(f"Stamping cancelled ({token_fp})")
            raise
        except (ParseError, RenderError, SerializationError) as e:
            logger.exception(f"Failed to stamp PDF ({token_fp}): {type(e).__name__}")
            raise StampingError() from e
        except Exception as e:
            logger.exception(f"Unexpected error while stamping PDF ({token_fp})")
            raise StampingError() from e

    def _stamp(
        self,
        pdf_bytes: bytes,
        uid: str,
        token: str,
        signature_info: Optional[str],
        now: Optional[datetime],
        cancel_event: Optional[threading.Event],
    ) -> bytes:
        style = self.style
        doc = self._open(pdf_bytes)
        try:
            try:
                font = fitz.Font(style.font_name)
            except Exception as e:
                raise RenderError(f"Cannot resolve font {style.font_name}: {e}") from e

            timestamp = None
            if signature_info:
                try:
                    timestamp = format_timestamp(now or utc_now(), style.locale, style.timezone)
                except Exception as e:
                    raise RenderError(f"Cannot format timestamp: {e}") from e

            page_count = doc.page_count
            for index, page in enumerate(doc, start=1):
                if cancel_event is not None and cancel_event.is_set():
                    raise StampingCancelled()

                footer = FooterMetadata(
                    uid=uid,
                    token=token,
                    page_index=index,
                    page_count=page_count,
                    signature_info=signature_info,
                    timestamp=timestamp,
                    label=style.label,
                )
                self._draw_footer(page, font, footer.text)

            try:
                output = doc.tobytes(garbage=4, deflate=True)
            except Exception as e:
                raise SerializationError(str(e)) from e
        finally:
            doc.close()

        logger.info(
            f"Stamped {page_count} page(s)"
            f"{' with signature info' if signature_info else ''}"
        )
        return output

    def _open(self, pdf_bytes: bytes) -> fitz.Document:
        """Open PDF bytes, rejecting anything without at least one page."""
        if not pdf_bytes:
            raise ParseError("Empty document")
        try:
            doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            raise ParseError(f"Invalid PDF file: {e}") from e

        if doc.needs_pass:
            doc.close()
            raise ParseError("Encrypted PDF")
        if doc.page_count < 1:
            doc.close()
            raise ParseError("PDF has no pages")
        return doc

    def _draw_footer(self, page: fitz.Page, font: fitz.Font, text: str) -> None:
        """Measure and draw one footer line, centered near the bottom edge."""
        style = self.style
        try:
            page_width = page.rect.width
            page_height = page.rect.height

            text_width = font.text_length(text, fontsize=style.font_size)
            x = centered_x(page_width, text_width)
            # Baseline, measured from the top in PyMuPDF coordinates
            y = page_height - style.bottom_margin

            point = fitz.Point(x, y) * page.derotation_matrix
            page.insert_text(
                point,
                text,
                fontname=style.font_name,
                fontsize=style.font_size,
                color=style.color,
                fill_opacity=style.opacity,
                stroke_opacity=style.opacity,
                rotate=page.rotation,
                overlay=True,
            )
        except Exception as e:
            raise RenderError(f"Failed to draw footer on page {page.number + 1}: {e}") from e


@lru_cache()
def get_footer_style() -> FooterStyle:
    """Footer style built once from settings; shared read-only afterwards."""
    from beaverdoc.config import get_settings

    settings = get_settings()
    return FooterStyle(
        label=settings.product_label,
        locale=settings.stamp_locale,
        timezone=settings.stamp_timezone,
    )


# Singleton instance
_pdf_stamper: Optional[PDFStamper] = None


def get_pdf_stamper() -> PDFStamper:
    """Get the PDF stamper singleton."""
    global _pdf_stamper
    if _pdf_stamper is None:
        _pdf_stamper = PDFStamper(style=get_footer_style())
    return _pdf_stamper

