import logging
from typing import Optional

from beaverdoc.config import Settings
from beaverdoc.exceptions import StampingException
from beaverdoc.models import AuditAction, UploadOptions
from beaverdoc.pdf import get_pdf_stamper, StampingError
from beaverdoc.storage import MemStorage, Document
from beaverdoc.utils.datetime_utils import utc_now
from beaverdoc.utils.logging import fingerprint, set_context
from beaverdoc.utils.security import (
    generate_uid,
    generate_token,
    token_from_uid,
    generate_signature_placeholder,
    certificate_reference,
    compute_bytes_hash,
)

logger = logging.getLogger(__name__)


def format_size(num_bytes: int) -> str:
    """Display size in megabytes: 1572864 -> "1.50 MB"."""
    return f"{num_bytes / 1024 / 1024:.2f} MB"


def signature_footer_info(document: Document) -> Optional[str]:
    """Signature text rendered in the footer of signed documents."""
    if not document.is_signed:
        return None
    if document.signature_data:
        return f"Signé #{certificate_reference(document.signature_data)}"
    return "Signé"


def sign_document(storage: MemStorage, document: Document, user_id: int) -> Document:
    """
    Mark a document as signed with placeholder signature data and audit it.

    The signature data is a random marker, not a cryptographic signature.
    """
    signature_data = generate_signature_placeholder()
    updated = storage.update_document(
        document.id,
        is_signed=True,
        signature_data=signature_data,
        signed_at=utc_now(),
    )

    storage.create_audit_log(
        document_id=document.id,
        user_id=user_id,
        action=AuditAction.SIGN,
        details=f"Document signed with certificate #{certificate_reference(signature_data)}",
    )

    logger.info(f"Document {document.id} signed")
    return updated


def register_upload(
    storage: MemStorage,
    settings: Settings,
    filename: str,
    content: bytes,
    content_type: str,
    options: UploadOptions,
) -> Document:
    """
    Store an uploaded file with fresh traceability identifiers.

    Stamping is not done here: the original bytes are kept untouched and
    footers are rendered on download.
    """
    now = utc_now()
    if options.generate_new_uid:
        uid = generate_uid(now, settings.demo_user_code, settings.demo_company_code)
    else:
        uid = options.uid
    token = generate_token(now) if options.add_token else token_from_uid(uid)

    document = storage.create_document(
        name=filename,
        uid=uid,
        token=token,
        content=content,
        content_type=content_type,
        size=format_size(len(content)),
        content_hash=compute_bytes_hash(content),
        creator_id=settings.demo_user_id,
    )
    set_context(document_id=str(document.id), token_fp=fingerprint(token, "tok_"))

    storage.create_audit_log(
        document_id=document.id,
        user_id=settings.demo_user_id,
        action=AuditAction.CREATE,
        details=f"Document uploaded: {filename}",
    )

    if options.sign_after_import:
        document = sign_document(storage, document, settings.demo_user_id)

    logger.info(
        f"Document uploaded: id={document.id}, size={document.size}, "
        f"signed={document.is_signed}"
    )
    return document


def render_stamped_document(
    storage: MemStorage,
    document: Document,
    user_id: int,
) -> bytes:
    """
    Produce the downloadable PDF: the stored original with a footer on each page.

    Raises:
        StampingException: If the stored file cannot be stamped
    """
    set_context(document_id=str(document.id), token_fp=fingerprint(document.token, "tok_"))
    stamper = get_pdf_stamper()

    try:
        stamped = stamper.stamp(
            document.content,
            document.uid,
            document.token,
            signature_footer_info(document),
        )
    except StampingError:
        raise StampingException()

    storage.create_audit_log(
        document_id=document.id,
        user_id=user_id,
        action=AuditAction.DOWNLOAD,
        details=f"Document downloaded: {document.name}",
    )
    return stamped
