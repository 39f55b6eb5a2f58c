"""Wires the field codec and decode cache into the cookie write and read paths."""
import logging
from typing import List, Optional, Sequence

from authcookie.domain.cache import DecodeCache
from authcookie.domain.codec import FieldCodec
from authcookie.domain.keys import KeyRing
from authcookie.errors import is_decode_failure
from authcookie.settings import FailurePolicy

logger = logging.getLogger(__name__)


class CookieFieldOrchestrator:
    """Encrypts the username on cookie construction and decrypts it on parsing.

    Failure policy:

    * ``PASS_THROUGH`` (default): a failed encryption issues the cookie with
      the username in plaintext, and a failed decryption hands back the
      original encoded string as if it were the username. Downstream identity
      resolution then sees a name that matches no user.
    * ``REJECT``: both paths return ``None`` so the host can refuse the cookie.

    With no key ring configured, or with a cipher that is unavailable in this
    runtime, encryption is disabled and both paths pass values through
    unchanged regardless of policy.
    """

    def __init__(
        self,
        codec: FieldCodec,
        keys: Optional[KeyRing],
        cache: Optional[DecodeCache] = None,
        on_failure: FailurePolicy = FailurePolicy.PASS_THROUGH,
        debug: bool = False,
    ):
        self.codec = codec
        self.keys = keys
        self.cache = cache if cache is not None else DecodeCache()
        self.on_failure = on_failure
        self.debug = debug

    @property
    def encryption_enabled(self) -> bool:
        return self.keys is not None and self.codec.cipher.available

    @property
    def marker(self) -> str:
        return self.codec.marker

    def encrypt_field(self, fields: Sequence[str]) -> Optional[List[str]]:
        """Replace the username (first element) with its encoded form."""
        fields = list(fields)
        if not fields or not self.encryption_enabled:
            return fields

        result = self.codec.encode(fields[0], self.keys.primary)
        if not result.ok:
            logger.error(f"Failed to encrypt username field: {result.error.value}")
            if self.on_failure == FailurePolicy.REJECT:
                return None
            return fields

        fields[0] = result.value
        return fields

    def decrypt_username(self, raw: str) -> Optional[str]:
        """Resolve a cookie username field to the plaintext username."""
        if not self.codec.is_encoded(raw) or not self.encryption_enabled:
            return raw

        cached = self.cache.lookup(raw)
        if cached is not None:
            return cached

        error = None
        for key in self.keys.decryption_keys():
            result = self.codec.decode(raw, key)
            if result.ok:
                self.cache.insert(raw, result.value)
                return result.value
            error = result.error
            if not is_decode_failure(error):
                break

        logger.debug(f"Failed to decrypt username field: {error.value if error else 'unknown'}")
        if self.on_failure == FailurePolicy.REJECT:
            return None
        return raw
