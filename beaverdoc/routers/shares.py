"""
Document sharing API.
"""
from typing import List

from fastapi import APIRouter, Depends, Path, Response

from beaverdoc.config import get_settings, Settings
from beaverdoc.exceptions import NotFoundError
from beaverdoc.models import AuditAction, DocumentShareResponse, ErrorResponse, ShareRequest
from beaverdoc.routers.documents import get_document_or_404
from beaverdoc.storage import MemStorage, get_storage
from beaverdoc.utils.logging import get_logger, mask_email
from beaverdoc.utils.security import email_to_user_id

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/documents",
    tags=["shares"],
)


@router.get(
    "/{document_id}/shares",
    response_model=List[DocumentShareResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_shares(
    document_id: int = Path(..., ge=1),
    storage: MemStorage = Depends(get_storage),
):
    get_document_or_404(storage, document_id)
    shares = storage.get_document_shares(document_id)
    return [DocumentShareResponse.model_validate(s, from_attributes=True) for s in shares]


@router.post(
    "/{document_id}/shares",
    response_model=DocumentShareResponse,
    status_code=201,
    responses={404: {"model": ErrorResponse}},
)
async def share_document(
    request_body: ShareRequest,
    document_id: int = Path(..., ge=1),
    settings: Settings = Depends(get_settings),
    storage: MemStorage = Depends(get_storage),
):
    """
    Share a document with a user identified by email.

    There is no user directory: the target user id is derived from the email.
    Sharing again with the same email replaces the permission.
    """
    get_document_or_404(storage, document_id)

    user_id = email_to_user_id(request_body.email, reserved=settings.demo_user_id)
    share = storage.create_document_share(
        document_id=document_id,
        user_id=user_id,
        permission=request_body.permission,
        email=request_body.email,
    )

    storage.create_audit_log(
        document_id=document_id,
        user_id=settings.demo_user_id,
        action=AuditAction.SHARE,
        details=f"Document shared with user: {request_body.email} ({request_body.permission.value})",
    )

    logger.info(
        f"Document {document_id} shared with {mask_email(request_body.email)} "
        f"({request_body.permission.value})"
    )
    return DocumentShareResponse.model_validate(share, from_attributes=True)


@router.delete(
    "/{document_id}/shares/{user_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
async def remove_share(
    document_id: int = Path(..., ge=1),
    user_id: int = Path(..., ge=1),
    settings: Settings = Depends(get_settings),
    storage: MemStorage = Depends(get_storage),
):
    get_document_or_404(storage, document_id)

    if not storage.remove_document_share(document_id, user_id):
        raise NotFoundError("Partage", f"{document_id}/{user_id}")

    storage.create_audit_log(
        document_id=document_id,
        user_id=settings.demo_user_id,
        action=AuditAction.SHARE,
        details=f"Document share removed for user ID: {user_id}",
    )
    return Response(status_code=204)
