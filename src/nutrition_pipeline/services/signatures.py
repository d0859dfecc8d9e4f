"""Job delivery signature verification with rotating keys."""

import base64
import binascii
import hashlib
import hmac
import logging
from dataclasses import dataclass

from nutrition_pipeline.errors import AuthenticationError

SIGNATURE_HEADER = "upstash-signature"
SIGNATURE_VERSION = "v1"

_logger = logging.getLogger(__name__)


def sign(body: bytes, key: str, version: str = SIGNATURE_VERSION) -> str:
    """Return a signature header value for a body under one key."""
    digest = hmac.new(key.encode("utf-8"), body, hashlib.sha256).digest()
    return f"{version},{base64.b64encode(digest).decode('ascii')}"


@dataclass
class SignatureVerifier:
    """HMAC-SHA256 verification against the current and next signing keys."""

    current_key: str | None
    next_key: str | None

    def verify(self, body: bytes, signature_header: str | None) -> None:
        """Raise AuthenticationError unless the body is signed by either key."""
        if not self.current_key or not self.next_key:
            _logger.error("Job signing keys are not configured")
            raise AuthenticationError("Signing keys are not configured")
        if not signature_header:
            raise AuthenticationError("Missing signature header")

        _, _, encoded = signature_header.partition(",")
        provided = _decode_signature(encoded)
        if provided is None:
            raise AuthenticationError("Malformed signature header")

        if _matches(body, self.current_key, provided):
            return
        if _matches(body, self.next_key, provided):
            _logger.info("Job signature verified with the next signing key")
            return
        raise AuthenticationError("Invalid signature")


def _matches(body: bytes, key: str, provided: bytes) -> bool:
    expected = hmac.new(key.encode("utf-8"), body, hashlib.sha256).digest()
    return hmac.compare_digest(expected, provided)


def _decode_signature(encoded: str) -> bytes | None:
    """Decode standard or URL-safe base64, with or without padding."""
    value = encoded.strip()
    if not value:
        return None
    value = value.replace("-", "+").replace("_", "/")
    value += "=" * (-len(value) % 4)
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None
