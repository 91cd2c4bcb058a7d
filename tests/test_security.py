"""
Tests for traceability identifiers and hashing.
"""
import re
from datetime import datetime, timezone
from types import SimpleNamespace

from beaverdoc.utils.security import (
    generate_uid,
    generate_token,
    token_from_uid,
    generate_signature_placeholder,
    certificate_reference,
    compute_bytes_hash,
    email_to_user_id,
    SIGNATURE_PREFIX,
)

NOW = datetime(2026, 10, 17, 14, 3, 22, tzinfo=timezone.utc)


class TestIdentifiers:
    """Tests for UID and token generation."""

    def test_uid_format(self):
        uid = generate_uid(NOW, "0042", "7890")
        assert re.match(r"^UID-20261017-140322-USR0042-CPY7890-[0-9a-f]{16}$", uid)

    def test_token_format(self):
        token = generate_token(NOW)
        assert re.match(r"^DOC-20261017-140322-[0-9a-f]{16}$", token)

    def test_identifiers_unique_within_same_second(self):
        """Random suffix keeps identifiers distinct for the same timestamp."""
        uids = {generate_uid(NOW, "0042", "7890") for _ in range(50)}
        tokens = {generate_token(NOW) for _ in range(50)}
        assert len(uids) == 50
        assert len(tokens) == 50

    def test_token_from_uid_is_stable(self):
        """Derived token depends only on the UID."""
        assert token_from_uid("UID-A") == token_from_uid("UID-A")
        assert token_from_uid("UID-A") != token_from_uid("UID-B")
        assert re.match(r"^DOC-[0-9a-f]{16}$", token_from_uid("UID-A"))


class TestSignaturePlaceholder:
    """Tests for placeholder signature data."""

    def test_prefix(self):
        assert generate_signature_placeholder().startswith(SIGNATURE_PREFIX)

    def test_unique(self):
        assert generate_signature_placeholder() != generate_signature_placeholder()

    def test_certificate_reference(self):
        assert certificate_reference("digital_signature_3f2a9c0b1d4e") == "3F2A9C0B"

    def test_certificate_reference_without_prefix(self):
        assert certificate_reference("abcdef0123") == "ABCDEF01"


class TestHashing:
    """Tests for hashing helpers."""

    def test_bytes_hash(self):
        digest = compute_bytes_hash(b"hello")
        assert digest == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"

    def test_email_to_user_id_range(self):
        for email in ("a@example.com", "b@example.com", "someone@else.org"):
            assert 2 <= email_to_user_id(email) <= 1001

    def test_email_to_user_id_normalized(self):
        """Case and surrounding spaces do not change the id."""
        assert email_to_user_id("Alice@Example.com ") == email_to_user_id("alice@example.com")

    def test_email_to_user_id_skips_reserved(self):
        """The reserved id is never returned."""
        email = "someone@example.com"
        reserved = email_to_user_id(email)
        user_id = email_to_user_id(email, reserved=reserved)

        assert user_id != reserved
        assert 2 <= user_id <= 1001

    def test_email_to_user_id_wraps_at_upper_bound(self, monkeypatch):
        """Bumping past 1001 wraps back to 2."""
        # 0x3e7 = 999 -> 999 % 1000 + 2 = 1001
        digest = SimpleNamespace(hexdigest=lambda: "000003e7" + "0" * 56)
        monkeypatch.setattr(
            "beaverdoc.utils.security.hashlib",
            SimpleNamespace(sha256=lambda data: digest),
        )

        assert email_to_user_id("edge@example.com") == 1001
        assert email_to_user_id("edge@example.com", reserved=1001) == 2
