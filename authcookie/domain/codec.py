"""Username field codec.

An encoded field has the shape ``marker + b64u(nonce + ciphertext)`` where
``b64u`` is URL-safe base64 without padding. Anything that does not start
with the marker is plaintext and is never a decode candidate.

Encode and decode return :class:`CodecResult` values. Malformed input and
failed authentication are distinguished here for diagnostics only; callers
must treat them as the same outcome.
"""
import base64
import binascii
import logging
import os
import re
from typing import Optional

from authcookie.domain.ports import CookieCipher
from authcookie.errors import CodecErrorKind, CodecResult

logger = logging.getLogger(__name__)

DEFAULT_MARKER = ":"

_B64U_PATTERN = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def b64u_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64u_decode(s: str) -> Optional[bytes]:
    """Decode URL-safe base64 with or without padding. None if invalid."""
    if not _B64U_PATTERN.fullmatch(s):
        return None
    s = s.rstrip("=")
    # Add padding back if necessary
    missing_padding = len(s) % 4
    if missing_padding:
        s += "=" * (4 - missing_padding)
    try:
        return base64.urlsafe_b64decode(s)
    except (binascii.Error, ValueError):
        return None


class FieldCodec:
    """Authenticated encryption of a single short string for a delimited field."""

    def __init__(self, cipher: CookieCipher, marker: str = DEFAULT_MARKER):
        if len(marker) != 1:
            raise ValueError(f"Marker must be a single character. Got {marker!r}")
        self.cipher = cipher
        self.marker = marker

    def is_encoded(self, field: str) -> bool:
        return field.startswith(self.marker)

    def _usable(self, key: Optional[bytes]) -> bool:
        return self.cipher.available and key is not None and len(key) == self.cipher.key_size

    def encode(self, plaintext: str, key: Optional[bytes]) -> CodecResult:
        if not self._usable(key):
            return CodecResult.failure(CodecErrorKind.UNAVAILABLE)

        try:
            nonce = os.urandom(self.cipher.nonce_size)
        except NotImplementedError:
            logger.error("No secure random source available for nonce generation")
            return CodecResult.failure(CodecErrorKind.UNAVAILABLE)

        ciphertext = self.cipher.seal(key, nonce, plaintext.encode("utf-8"))
        return CodecResult.success(self.marker + b64u_encode(nonce + ciphertext))

    def decode(self, field: str, key: Optional[bytes]) -> CodecResult:
        if not self.is_encoded(field):
            return CodecResult.failure(CodecErrorKind.NOT_ENCODED)
        if not self._usable(key):
            return CodecResult.failure(CodecErrorKind.UNAVAILABLE)

        data = b64u_decode(field[len(self.marker):])
        if data is None or len(data) < self.cipher.nonce_size:
            return CodecResult.failure(CodecErrorKind.MALFORMED)

        nonce = data[:self.cipher.nonce_size]
        ciphertext = data[self.cipher.nonce_size:]

        plaintext = self.cipher.open(key, nonce, ciphertext)
        if plaintext is None:
            return CodecResult.failure(CodecErrorKind.AUTHENTICATION_FAILED)

        try:
            return CodecResult.success(plaintext.decode("utf-8"))
        except UnicodeDecodeError:
            return CodecResult.failure(CodecErrorKind.MALFORMED)
