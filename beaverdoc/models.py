from datetime import datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BaseRequest(BaseModel):
    """Base class for all request models - ignores extra fields."""
    model_config = ConfigDict(extra="ignore")


# Enums
class AuditAction(str, Enum):
    CREATE = "create"
    SIGN = "sign"
    SHARE = "share"
    DOWNLOAD = "download"


class SharePermission(str, Enum):
    READ = "read"
    WRITE = "write"


# Upload
ALLOWED_UPLOAD_CONTENT_TYPES = {
    "application/pdf",
    "application/x-pdf",
}


class UploadOptions(BaseRequest):
    """
    Per-upload options, sent as a JSON string in the multipart `options` field.

    Immutable; a missing field means the defaults below.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    generate_new_uid: bool = Field(
        default=True,
        description="Generate a fresh UID. When false, `uid` must be provided and is reused."
    )
    add_token: bool = Field(
        default=True,
        description="Generate a tracking token. When false, the token is derived from the UID."
    )
    sign_after_import: bool = Field(
        default=False,
        description="Sign the document right after the upload"
    )
    uid: Optional[str] = Field(None, min_length=1, max_length=128)

    @model_validator(mode="after")
    def _require_uid_when_reused(self) -> "UploadOptions":
        if not self.generate_new_uid and not self.uid:
            raise ValueError("uid is required when generate_new_uid is false")
        return self


# Request Models
class AuditLogCreateRequest(BaseRequest):
    """Manual audit log entry."""
    document_id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    action: AuditAction
    details: Optional[str] = Field(None, max_length=1000)


class ShareRequest(BaseRequest):
    """Share a document with someone identified by email."""
    email: str = Field(..., min_length=3, max_length=254)
    permission: SharePermission = SharePermission.READ

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or not domain or "." not in domain:
            raise ValueError("Invalid email address")
        return v


# Response Models
class DocumentResponse(BaseModel):
    """Document metadata. File content is only served by the download endpoint."""
    id: int
    name: str
    uid: str
    token: str
    content_type: str
    size: str
    content_hash: str
    creator_id: int
    is_signed: bool = False
    signature_data: Optional[str] = None
    signed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AuditLogResponse(BaseModel):
    """Audit trail entry."""
    id: int
    document_id: int
    user_id: int
    action: AuditAction
    details: Optional[str] = None
    timestamp: datetime


class DocumentShareResponse(BaseModel):
    """Share record."""
    id: int
    document_id: int
    user_id: int
    email: Optional[str] = None
    permission: SharePermission
    created_at: datetime


class ErrorResponse(BaseModel):
    """Error body returned by every API error."""
    error: bool = True
    code: str
    message: str
    request_id: Optional[str] = None
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    status: str
    version: str


class StamperHealthResponse(BaseModel):
    success: bool
    duration_seconds: float
    steps: List[str]
    error: Optional[str] = None
