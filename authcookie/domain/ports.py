"""Cookie Crypto Domain Ports (Interfaces)."""
from abc import ABC, abstractmethod
from typing import Optional


class CookieCipher(ABC):
    """Abstract Port for the authenticated cipher used on cookie fields.

    Implementations are registered once at process start and are stateless
    apart from configuration, so they may be shared across threads.
    """

    @property
    @abstractmethod
    def key_size(self) -> int:
        """Required key length in bytes."""
        ...

    @property
    @abstractmethod
    def nonce_size(self) -> int:
        """Required nonce length in bytes."""
        ...

    @property
    @abstractmethod
    def tag_size(self) -> int:
        """Length of the authentication tag appended to the ciphertext."""
        ...

    @property
    def available(self) -> bool:
        """Whether the underlying primitive can be used in this runtime."""
        return True

    @abstractmethod
    def seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        """Encrypt and authenticate plaintext. Returns ciphertext + tag."""
        ...

    @abstractmethod
    def open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> Optional[bytes]:
        """Verify and decrypt. Returns None when authentication fails."""
        ...
