"""Secret key normalization and the process key ring."""
import hashlib
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple, Union

KEY_LENGTH = 32


def derive_key(secret: Union[bytes, str]) -> bytes:
    """Normalize a configured secret into a 32-byte symmetric key.

    A secret that is already 32 bytes long is used verbatim, anything else
    is hashed with SHA-256. Text secrets are UTF-8 encoded first.
    """
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    if len(secret) == KEY_LENGTH:
        return secret
    return hashlib.sha256(secret).digest()


@dataclass(frozen=True)
class KeyRing:
    """Primary key for new encryptions plus retired keys still accepted on decode."""
    primary: bytes
    previous: Tuple[bytes, ...] = ()

    @classmethod
    def from_secrets(cls, primary: Union[bytes, str], previous: Iterable[Union[bytes, str]] = ()) -> "KeyRing":
        return cls(
            primary=derive_key(primary),
            previous=tuple(derive_key(s) for s in previous if s),
        )

    def decryption_keys(self) -> Iterator[bytes]:
        yield self.primary
        for key in self.previous:
            if key != self.primary:
                yield key


def key_ring_from_settings(settings) -> Optional[KeyRing]:
    """Build the key ring, or None when no secret is configured."""
    if not settings.AUTH_COOKIE_KEY:
        return None
    return KeyRing.from_secrets(settings.AUTH_COOKIE_KEY, settings.AUTH_COOKIE_PREVIOUS_KEYS)
