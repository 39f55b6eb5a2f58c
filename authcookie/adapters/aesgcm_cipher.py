"""AES-256-GCM Cookie Cipher Adapter."""
import logging
from typing import Optional

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from authcookie.domain.ports import CookieCipher

logger = logging.getLogger(__name__)

# GCM accepts nonces between 8 and 128 bytes; 24 keeps the random-nonce
# collision space the same as the cookie wire format expects.
AESGCM_NONCE_SIZE = 24
AESGCM_TAG_SIZE = 16


class AesGcmCipher(CookieCipher):
    """Default cookie cipher: AES-256-GCM with a 24-byte random nonce and no AAD."""

    def __init__(self):
        try:
            AESGCM(bytes(self.key_size))
            self._available = True
        except UnsupportedAlgorithm as e:
            logger.error(f"AES-GCM is not supported by the cryptography backend: {e}")
            self._available = False

    @property
    def key_size(self) -> int:
        return 32

    @property
    def nonce_size(self) -> int:
        return AESGCM_NONCE_SIZE

    @property
    def tag_size(self) -> int:
        return AESGCM_TAG_SIZE

    @property
    def available(self) -> bool:
        return self._available

    def seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        # encrypt returns ciphertext + tag
        return AESGCM(key).encrypt(nonce, plaintext, None)

    def open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> Optional[bytes]:
        try:
            return AESGCM(key).decrypt(nonce, ciphertext, None)
        except InvalidTag:
            return None
