"""
Audit trail API.
"""
from typing import List

from fastapi import APIRouter, Depends, Path

from beaverdoc.models import AuditLogCreateRequest, AuditLogResponse, ErrorResponse
from beaverdoc.routers.documents import get_document_or_404
from beaverdoc.storage import MemStorage, get_storage
from beaverdoc.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["audit"],
)


@router.get(
    "/documents/{document_id}/auditlogs",
    response_model=List[AuditLogResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_audit_logs(
    document_id: int = Path(..., ge=1),
    storage: MemStorage = Depends(get_storage),
):
    """Audit entries of a document, oldest first."""
    get_document_or_404(storage, document_id)
    logs = storage.get_audit_logs_by_document_id(document_id)
    return [AuditLogResponse.model_validate(log, from_attributes=True) for log in logs]


@router.post(
    "/auditlogs",
    response_model=AuditLogResponse,
    status_code=201,
    responses={404: {"model": ErrorResponse}},
)
async def create_audit_log(
    request_body: AuditLogCreateRequest,
    storage: MemStorage = Depends(get_storage),
):
    """Append an audit entry to an existing document."""
    get_document_or_404(storage, request_body.document_id)
    log = storage.create_audit_log(
        document_id=request_body.document_id,
        user_id=request_body.user_id,
        action=request_body.action,
        details=request_body.details,
    )
    logger.info(f"Audit entry {log.id} ({log.action.value}) added to document {log.document_id}")
    return AuditLogResponse.model_validate(log, from_attributes=True)
