"""Auth cookie construction and parsing call sites.

A cookie value has four pipe-delimited elements::

    username|expiration|token|hmac

Only the username element is touched here. Expiration, token and HMAC are
produced and validated by the host.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from authcookie.domain.orchestrator import CookieFieldOrchestrator
from authcookie.settings import COOKIE_DELIMITER

logger = logging.getLogger(__name__)

COOKIE_ELEMENT_COUNT = 4


@dataclass(frozen=True)
class AuthCookie:
    username: str
    expiration: str
    token: str
    hmac: str
    scheme: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_auth_cookie(
    cookie: str,
    user_id: int,
    expiration: int,
    token: str,
    scheme: str,
    orchestrator: CookieFieldOrchestrator,
) -> Optional[str]:
    """Encrypt the username element of a freshly built auth cookie.

    Returns the cookie unchanged when it is not four elements long or when
    encryption is disabled. Returns None only if encryption failed under the
    reject policy.
    """
    elements = cookie.split(COOKIE_DELIMITER)
    if len(elements) != COOKIE_ELEMENT_COUNT:
        logger.warning(
            f"Auth cookie for user {user_id} has {len(elements)} elements, expected {COOKIE_ELEMENT_COUNT}; "
            "leaving it unencrypted"
        )
        return cookie

    encrypted = orchestrator.encrypt_field(elements)
    if encrypted is None:
        return None

    encrypted_cookie = COOKIE_DELIMITER.join(encrypted)
    if orchestrator.debug and encrypted_cookie != cookie:
        logger.debug(
            f"Cookie encrypted successfully user_id={user_id} scheme={scheme} "
            f"original_length={len(cookie)} encrypted_length={len(encrypted_cookie)}"
        )
    return encrypted_cookie


def parse_auth_cookie(
    cookie: str,
    orchestrator: CookieFieldOrchestrator,
    scheme: str = "",
) -> Optional[AuthCookie]:
    """Split an auth cookie and resolve its username. None if unusable."""
    if not cookie:
        return None

    elements = cookie.split(COOKIE_DELIMITER)
    if len(elements) != COOKIE_ELEMENT_COUNT:
        return None

    username, expiration, token, hmac = elements
    username = orchestrator.decrypt_username(username)
    if username is None:
        return None

    return AuthCookie(
        username=username,
        expiration=expiration,
        token=token,
        hmac=hmac,
        scheme=scheme,
    )
