"""Dependency wiring, done once at process start."""
import logging
from typing import List, Optional

from authcookie.adapters.aesgcm_cipher import AesGcmCipher
from authcookie.domain.cache import DecodeCache
from authcookie.domain.codec import FieldCodec
from authcookie.domain.keys import key_ring_from_settings
from authcookie.domain.orchestrator import CookieFieldOrchestrator
from authcookie.domain.ports import CookieCipher
from authcookie.logging_hardening import setup_logging_redaction
from authcookie.settings import Settings

logger = logging.getLogger(__name__)


def check_availability(settings: Settings, cipher: Optional[CookieCipher] = None) -> List[str]:
    """Return the reasons cookie encryption cannot run. Empty means ready."""
    cipher = cipher or AesGcmCipher()
    problems = []
    if not cipher.available:
        problems.append(
            f"{type(cipher).__name__} is not available in this runtime; "
            "install a cryptography build with AES-GCM support"
        )
    if not settings.encryption_enabled:
        problems.append(
            "AUTH_COOKIE_KEY is not set; define it in the environment or .env "
            "(e.g. AUTH_COOKIE_KEY=your-secret-key-here)"
        )
    return problems


def build_orchestrator(
    settings: Optional[Settings] = None,
    cipher: Optional[CookieCipher] = None,
    cache: Optional[DecodeCache] = None,
) -> CookieFieldOrchestrator:
    """Construct the orchestrator the host keeps for the process lifetime.

    When encryption cannot run, the orchestrator is built without keys and
    passes usernames through unchanged.
    """
    settings = settings or Settings()
    cipher = cipher or AesGcmCipher()
    setup_logging_redaction(settings.AUTH_COOKIE_MARKER)

    problems = check_availability(settings, cipher)
    for problem in problems:
        logger.warning(f"Auth cookie encryption disabled: {problem}")

    keys = None if problems else key_ring_from_settings(settings)
    if cache is None:
        cache = DecodeCache(max_entries=settings.AUTH_COOKIE_CACHE_MAX_ENTRIES)

    orchestrator = CookieFieldOrchestrator(
        codec=FieldCodec(cipher, marker=settings.AUTH_COOKIE_MARKER),
        keys=keys,
        cache=cache,
        on_failure=settings.AUTH_COOKIE_ON_FAILURE,
        debug=settings.AUTH_COOKIE_DEBUG,
    )
    if keys is not None:
        logger.info(
            f"Auth cookie encryption enabled (previous keys: {len(keys.previous)}, "
            f"on_failure={settings.AUTH_COOKIE_ON_FAILURE.value})"
        )
    return orchestrator
