import logging
import os
import pytest

from authcookie.adapters.aesgcm_cipher import AesGcmCipher
from authcookie.domain.cache import DecodeCache
from authcookie.domain import codec as codec_module
from authcookie.domain.codec import FieldCodec
from authcookie.domain.keys import KeyRing
from authcookie.domain.orchestrator import CookieFieldOrchestrator
from authcookie.logging_hardening import CookieRedactionFilter


class CountingCipher(AesGcmCipher):
    """AES-GCM cipher that records how often the open primitive runs."""

    def __init__(self):
        super().__init__()
        self.open_calls = 0

    def open(self, key, nonce, ciphertext):
        self.open_calls += 1
        return super().open(key, nonce, ciphertext)


class UnavailableCipher(AesGcmCipher):
    @property
    def available(self) -> bool:
        return False


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host AUTH_COOKIE_* variables out of settings-driven tests."""
    for k in list(os.environ.keys()):
        if k.startswith("AUTH_COOKIE_"):
            monkeypatch.delenv(k)


@pytest.fixture(autouse=True)
def reset_log_filters():
    yield
    loggers = [logging.getLogger()] + [
        logging.getLogger(n) for n in list(logging.root.manager.loggerDict) if n.startswith("authcookie")
    ]
    for logger in loggers:
        for f in logger.filters[:]:
            if isinstance(f, CookieRedactionFilter):
                logger.removeFilter(f)


@pytest.fixture
def no_entropy(monkeypatch):
    """Simulate a runtime without a secure random source."""
    def urandom(n):
        raise NotImplementedError("no random source")
    monkeypatch.setattr(codec_module.os, "urandom", urandom)


@pytest.fixture
def cipher():
    return CountingCipher()


@pytest.fixture
def codec(cipher):
    return FieldCodec(cipher)


@pytest.fixture
def keys():
    return KeyRing.from_secrets("mysecret")


@pytest.fixture
def orchestrator(codec, keys):
    return CookieFieldOrchestrator(codec=codec, keys=keys, cache=DecodeCache())
