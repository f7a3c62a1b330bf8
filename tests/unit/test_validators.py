"""Unit tests for payload signature validation."""

from __future__ import annotations

import hashlib
import hmac
from typing import TYPE_CHECKING

import pytest

from webhook_validator.webhook.validators import ValidationError, validate_payload

if TYPE_CHECKING:
    from collections.abc import Callable

PAYLOAD = b'{ "ref": "refs/heads/18f-pages" }'
SECRET = "deadbeef"


@pytest.fixture
def signature(make_signature: Callable[[bytes | str, str], str]) -> str:
    """Valid signature of PAYLOAD under SECRET."""
    return make_signature(PAYLOAD, SECRET)


class TestValidatePayload:
    """Tests for validate_payload."""

    def test_pass_without_signature_and_secret(self) -> None:
        """Test that an unsigned payload passes when no secret is configured."""
        assert validate_payload(PAYLOAD) is True

    def test_fail_with_signature_and_no_secret(self, signature: str) -> None:
        """Test that a signed payload fails when no secret is configured."""
        assert validate_payload(PAYLOAD, signature) is False

    def test_fail_without_signature_and_with_secret(self) -> None:
        """Test that an unsigned payload fails when a secret is configured."""
        assert validate_payload(PAYLOAD, None, SECRET) is False

    def test_pass_if_signature_matches(self, signature: str) -> None:
        """Test that a matching signature passes."""
        assert validate_payload(PAYLOAD, signature, SECRET) is True

    def test_fail_if_secret_differs(self, signature: str) -> None:
        """Test that a different secret fails."""
        assert validate_payload(PAYLOAD, signature, SECRET + " extra") is False

    def test_fail_if_hash_character_flipped(self, signature: str) -> None:
        """Test that changing one hex digit fails."""
        last = signature[-1]
        tampered = signature[:-1] + ("0" if last != "0" else "1")

        assert validate_payload(PAYLOAD, tampered, SECRET) is False

    def test_fail_if_payload_changed(self, signature: str) -> None:
        """Test that a modified payload fails."""
        assert validate_payload(PAYLOAD + b" ", signature, SECRET) is False

    def test_fail_if_algorithm_not_supported(self, signature: str) -> None:
        """Test that an unknown algorithm fails without raising."""
        unsupported = "foobar=" + signature.split("=")[1]

        assert validate_payload(PAYLOAD, unsupported, SECRET) is False

    @pytest.mark.parametrize("malformed", ["sha1", "sha1=abc=def", "=abc"])
    def test_fail_if_signature_malformed(self, malformed: str) -> None:
        """Test that a signature not shaped like algorithm=hash fails."""
        assert validate_payload(PAYLOAD, malformed, SECRET) is False

    def test_comparison_is_case_sensitive(self, signature: str) -> None:
        """Test that an upper-cased hex digest does not match."""
        algorithm, digest = signature.split("=")
        assert digest != digest.upper()

        assert validate_payload(PAYLOAD, f"{algorithm}={digest.upper()}", SECRET) is False

    def test_other_algorithms(self) -> None:
        """Test that the algorithm named in the signature is used."""
        digest = hmac.new(SECRET.encode(), PAYLOAD, hashlib.sha256).hexdigest()

        assert validate_payload(PAYLOAD, f"sha256={digest}", SECRET) is True
        assert validate_payload(PAYLOAD, f"sha1={digest}", SECRET) is False

    def test_utf8_payload_hashed_as_raw_bytes(
        self, make_signature: Callable[[bytes | str, str], str]
    ) -> None:
        """Test a payload containing a multi-byte smart quote."""
        payload = (
            '"description": "Guide to help agencies understand what '
            "it’s like to work with 18F. \","
        ).encode()

        signature = make_signature(payload, SECRET)

        assert signature == "sha1=6364b3c77dc014e0226e541fc47615141e54428d"
        assert validate_payload(payload, signature, SECRET) is True
        assert validate_payload(payload.decode("utf-8"), signature, SECRET) is True


class TestValidationError:
    """Tests for ValidationError."""

    def test_message_and_fields(self) -> None:
        """Test that the error carries the request details."""
        error = ValidationError("18f-pages", "01234567", "127.0.0.1")

        assert error.key_label == "18f-pages"
        assert error.webhook_id == "01234567"
        assert error.ip == "127.0.0.1"
        assert str(error) == "invalid webhook: 18f-pages 01234567 127.0.0.1"
