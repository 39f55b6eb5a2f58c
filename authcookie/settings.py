"""Settings and configuration."""
import re
from enum import Enum
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Load .env file if it exists
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

COOKIE_DELIMITER = "|"

# Encoded payloads use the base64url alphabet, so the marker must lie outside it
_MARKER_DISALLOWED = re.compile(r"[A-Za-z0-9_\-\s]")


class FailurePolicy(str, Enum):
    """What the orchestrator does when encryption or decryption fails."""
    PASS_THROUGH = "pass_through"
    REJECT = "reject"


class Settings(BaseSettings):
    # Security
    AUTH_COOKIE_KEY: Optional[str] = None
    AUTH_COOKIE_PREVIOUS_KEYS: List[str] = []
    AUTH_COOKIE_MARKER: str = ":"

    # Failure handling
    AUTH_COOKIE_ON_FAILURE: FailurePolicy = FailurePolicy.PASS_THROUGH

    # Decode cache (None = unbounded for the process lifetime)
    AUTH_COOKIE_CACHE_MAX_ENTRIES: Optional[int] = None

    # Observability
    AUTH_COOKIE_DEBUG: bool = False

    @field_validator("AUTH_COOKIE_MARKER")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"AUTH_COOKIE_MARKER must be a single character. Got len={len(v)}")
        if v == COOKIE_DELIMITER:
            raise ValueError("AUTH_COOKIE_MARKER cannot be the cookie delimiter")
        if _MARKER_DISALLOWED.match(v):
            raise ValueError("AUTH_COOKIE_MARKER cannot be whitespace or a base64url character")
        return v

    @field_validator("AUTH_COOKIE_CACHE_MAX_ENTRIES")
    @classmethod
    def validate_cache_bound(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("AUTH_COOKIE_CACHE_MAX_ENTRIES must be positive when set")
        return v

    @property
    def encryption_enabled(self) -> bool:
        return bool(self.AUTH_COOKIE_KEY)

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "extra": "ignore",
    }
