"""
Traceability identifiers and hashing: document UID/token generation,
content hashes, placeholder signature data.
"""
import hashlib
import uuid
from datetime import datetime

SIGNATURE_PREFIX = "digital_signature_"


def _date_time_parts(now: datetime) -> tuple:
    """Return (YYYYMMDD, HHMMSS) for the given moment."""
    return now.strftime("%Y%m%d"), now.strftime("%H%M%S")


def _random_hex(length: int = 16) -> str:
    return uuid.uuid4().hex[:length]


def generate_uid(now: datetime, user_code: str, company_code: str) -> str:
    """
    Generate a unique document identifier.

    Format: UID-YYYYMMDD-HHMMSS-USR<user>-CPY<company>-<16 hex chars>

    Example:
        generate_uid(now, "0042", "7890")
        -> "UID-20261017-140322-USR0042-CPY7890-3f2a9c0b1d4e5f60"
    """
    date, time = _date_time_parts(now)
    return f"UID-{date}-{time}-USR{user_code}-CPY{company_code}-{_random_hex()}"


def generate_token(now: datetime) -> str:
    """
    Generate a tracking token for a document version.

    Format: DOC-YYYYMMDD-HHMMSS-<16 hex chars>
    """
    date, time = _date_time_parts(now)
    return f"DOC-{date}-{time}-{_random_hex()}"


def token_from_uid(uid: str) -> str:
    """Derive a stable token from a UID (used when token generation is disabled)."""
    return f"DOC-{hashlib.sha256(uid.encode()).hexdigest()[:16]}"


def generate_signature_placeholder() -> str:
    """
    Generate placeholder signature data.

    NOTE: This is NOT a cryptographic signature. It is a random marker
    recording that the sign action happened; it proves nothing about the
    document content or the signer.
    """
    return f"{SIGNATURE_PREFIX}{uuid.uuid4().hex}"


def certificate_reference(signature_data: str) -> str:
    """
    Short, upper-case reference shown to users for a signature.

    digital_signature_3f2a9c0b... -> "3F2A9C0B"
    """
    if signature_data.startswith(SIGNATURE_PREFIX):
        signature_data = signature_data[len(SIGNATURE_PREFIX):]
    return signature_data[:8].upper()


def compute_bytes_hash(data: bytes) -> str:
    """Compute SHA-256 hash of bytes."""
    return hashlib.sha256(data).hexdigest()


def email_to_user_id(email: str, reserved: int = 1) -> int:
    """
    Map an email to a stable demo user id in [2, 1001].

    Stand-in for a user directory lookup; never returns the reserved id.
    """
    digest = hashlib.sha256(email.strip().lower().encode()).hexdigest()
    user_id = int(digest[:8], 16) % 1000 + 2
    if user_id == reserved:
        user_id = 2 if user_id == 1001 else user_id + 1
    return user_id
