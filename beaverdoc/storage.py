"""
In-memory storage for documents, audit logs and shares.
Thread-safe for a single-process deployment; contents are lost on restart.
"""
import copy
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from beaverdoc.models import AuditAction, SharePermission
from beaverdoc.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class Document:
    id: int
    name: str
    uid: str
    token: str
    content: bytes
    content_type: str
    size: str
    content_hash: str
    creator_id: int
    is_signed: bool = False
    signature_data: Optional[str] = None
    signed_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


@dataclass
class AuditLog:
    id: int
    document_id: int
    user_id: int
    action: AuditAction
    details: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class DocumentShare:
    id: int
    document_id: int
    user_id: int
    permission: SharePermission = SharePermission.READ
    email: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)


# Fields that update_document never overwrites
_IMMUTABLE_DOCUMENT_FIELDS = {"id", "created_at"}


class MemStorage:
    """
    Dict-backed store. Every method takes the lock and returns copies,
    so callers never hold references to stored records.
    """

    def __init__(self):
        self._documents: Dict[int, Document] = {}
        self._audit_logs: List[AuditLog] = []
        self._shares: Dict[Tuple[int, int], DocumentShare] = {}
        self._next_ids = {"document": 1, "audit_log": 1, "share": 1}
        self._lock = threading.Lock()

    def _next_id(self, kind: str) -> int:
        value = self._next_ids[kind]
        self._next_ids[kind] = value + 1
        return value

    # Documents

    def get_all_documents(self) -> List[Document]:
        with self._lock:
            return [copy.copy(doc) for doc in self._documents.values()]

    def get_document(self, document_id: int) -> Optional[Document]:
        with self._lock:
            doc = self._documents.get(document_id)
            return copy.copy(doc) if doc else None

    def create_document(
        self,
        name: str,
        uid: str,
        token: str,
        content: bytes,
        content_type: str,
        size: str,
        content_hash: str,
        creator_id: int,
    ) -> Document:
        with self._lock:
            doc = Document(
                id=self._next_id("document"),
                name=name,
                uid=uid,
                token=token,
                content=content,
                content_type=content_type,
                size=size,
                content_hash=content_hash,
                creator_id=creator_id,
            )
            self._documents[doc.id] = doc
            logger.debug(f"Document stored: {doc.id}")
            return copy.copy(doc)

    def update_document(self, document_id: int, **changes) -> Optional[Document]:
        """
        Apply field changes to a document.

        Returns:
            The updated document, or None if it does not exist

        Raises:
            ValueError: If an unknown or immutable field is given
        """
        with self._lock:
            doc = self._documents.get(document_id)
            if doc is None:
                return None
            for key, value in changes.items():
                if key in _IMMUTABLE_DOCUMENT_FIELDS or not hasattr(doc, key):
                    raise ValueError(f"Cannot update document field: {key}")
                setattr(doc, key, value)
            doc.updated_at = utc_now()
            return copy.copy(doc)

    # Audit logs

    def create_audit_log(
        self,
        document_id: int,
        user_id: int,
        action: AuditAction,
        details: Optional[str] = None,
    ) -> AuditLog:
        with self._lock:
            log = AuditLog(
                id=self._next_id("audit_log"),
                document_id=document_id,
                user_id=user_id,
                action=action,
                details=details,
            )
            self._audit_logs.append(log)
            return copy.copy(log)

    def get_audit_logs_by_document_id(self, document_id: int) -> List[AuditLog]:
        with self._lock:
            return [copy.copy(log) for log in self._audit_logs if log.document_id == document_id]

    # Shares

    def get_document_shares(self, document_id: int) -> List[DocumentShare]:
        with self._lock:
            return [
                copy.copy(share) for (doc_id, _), share in self._shares.items()
                if doc_id == document_id
            ]

    def create_document_share(
        self,
        document_id: int,
        user_id: int,
        permission: SharePermission,
        email: Optional[str] = None,
    ) -> DocumentShare:
        """Create a share, or replace the permission of an existing one."""
        with self._lock:
            key = (document_id, user_id)
            existing = self._shares.get(key)
            if existing is not None:
                existing.permission = permission
                existing.email = email or existing.email
                return copy.copy(existing)

            share = DocumentShare(
                id=self._next_id("share"),
                document_id=document_id,
                user_id=user_id,
                permission=permission,
                email=email,
            )
            self._shares[key] = share
            return copy.copy(share)

    def remove_document_share(self, document_id: int, user_id: int) -> bool:
        """Returns True if a share was removed."""
        with self._lock:
            return self._shares.pop((document_id, user_id), None) is not None


# Singleton instance
_storage: Optional[MemStorage] = None


def get_storage() -> MemStorage:
    """Get the storage singleton (FastAPI dependency)."""
    global _storage
    if _storage is None:
        _storage = MemStorage()
    return _storage
