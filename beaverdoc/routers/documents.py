"""
Documents API: upload, list, read, sign, download (stamped PDF).
Paths: /api/documents
"""
import json
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError

from beaverdoc.config import get_settings, Settings
from beaverdoc.exceptions import (
    NotFoundError,
    ValidationException,
    PayloadTooLargeException,
)
from beaverdoc.models import (
    ALLOWED_UPLOAD_CONTENT_TYPES,
    DocumentResponse,
    ErrorResponse,
    UploadOptions,
)
from beaverdoc.services.document_service import (
    register_upload,
    sign_document,
    render_stamped_document,
)
from beaverdoc.storage import MemStorage, Document, get_storage
from beaverdoc.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/documents",
    tags=["documents"],
)

PDF_MAGIC = b"%PDF-"
UPLOAD_CHUNK_SIZE = 64 * 1024


def get_document_or_404(storage: MemStorage, document_id: int) -> Document:
    """Load a document or raise NotFoundError."""
    document = storage.get_document(document_id)
    if document is None:
        raise NotFoundError("Document", document_id)
    return document


def parse_upload_options(raw: Optional[str]) -> UploadOptions:
    """Parse the multipart `options` field (JSON string). Missing means defaults."""
    if raw is None or not raw.strip():
        return UploadOptions()
    try:
        return UploadOptions.model_validate(json.loads(raw))
    except json.JSONDecodeError:
        raise ValidationException("Options d'importation invalides : JSON mal formé")
    except ValidationError as e:
        raise ValidationException(
            "Options d'importation invalides",
            details={"errors": [err["msg"] for err in e.errors()]},
        )


async def _read_upload(file: UploadFile, max_bytes: int) -> bytes:
    """Read the upload in chunks, failing fast once the limit is crossed."""
    chunks = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise PayloadTooLargeException(max_bytes)
        chunks.append(chunk)
    return b"".join(chunks)


def _validate_pdf_upload(file: UploadFile, content: bytes) -> str:
    """Check the upload looks like a PDF; returns the normalized content type."""
    content_type = (file.content_type or "").lower().strip()
    filename = file.filename or ""

    if content_type not in ALLOWED_UPLOAD_CONTENT_TYPES and not filename.lower().endswith(".pdf"):
        raise ValidationException(
            "Seuls les fichiers PDF sont acceptés",
            details={"content_type": content_type},
        )
    if not content:
        raise ValidationException("Le fichier importé est vide")
    if content.lstrip()[:len(PDF_MAGIC)] != PDF_MAGIC:
        raise ValidationException("Le fichier importé n'est pas un PDF valide")

    return "application/pdf"


@router.get("", response_model=List[DocumentResponse])
async def list_documents(storage: MemStorage = Depends(get_storage)):
    """List all documents (metadata only)."""
    documents = storage.get_all_documents()
    return [DocumentResponse.model_validate(doc, from_attributes=True) for doc in documents]


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_document(
    document_id: int = Path(..., ge=1),
    storage: MemStorage = Depends(get_storage),
):
    """Get one document's metadata."""
    document = get_document_or_404(storage, document_id)
    return DocumentResponse.model_validate(document, from_attributes=True)


@router.post(
    "/upload",
    response_model=DocumentResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Missing, empty or non-PDF file"},
        413: {"model": ErrorResponse, "description": "File too large"},
    },
)
async def upload_document(
    file: Optional[UploadFile] = File(None, description="PDF document to import"),
    options: Optional[str] = Form(None, description="JSON-encoded UploadOptions"),
    settings: Settings = Depends(get_settings),
    storage: MemStorage = Depends(get_storage),
):
    """
    Import a PDF document.

    Generates the document UID and tracking token and records a `create`
    audit entry. With `sign_after_import`, the document is signed right away.
    """
    if file is None:
        raise ValidationException("Aucun fichier n'a été téléchargé")

    upload_options = parse_upload_options(options)
    content = await _read_upload(file, settings.max_upload_bytes)
    content_type = _validate_pdf_upload(file, content)

    document = register_upload(
        storage=storage,
        settings=settings,
        filename=file.filename or "document.pdf",
        content=content,
        content_type=content_type,
        options=upload_options,
    )
    return DocumentResponse.model_validate(document, from_attributes=True)


@router.post(
    "/{document_id}/sign",
    response_model=DocumentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def sign(
    document_id: int = Path(..., ge=1),
    settings: Settings = Depends(get_settings),
    storage: MemStorage = Depends(get_storage),
):
    """
    Sign a document.

    NOTE: signature_data is a placeholder marker, not a cryptographic signature.
    """
    document = get_document_or_404(storage, document_id)
    updated = sign_document(storage, document, settings.demo_user_id)
    return DocumentResponse.model_validate(updated, from_attributes=True)


@router.get(
    "/{document_id}/download",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Stamped PDF"},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse, "description": "Stamping failed"},
    },
)
async def download_document(
    document_id: int = Path(..., ge=1),
    settings: Settings = Depends(get_settings),
    storage: MemStorage = Depends(get_storage),
):
    """Download the PDF with the traceability footer on every page."""
    document = get_document_or_404(storage, document_id)
    stamped = render_stamped_document(storage, document, settings.demo_user_id)

    return Response(
        content=stamped,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(document.name)}",
        },
    )
