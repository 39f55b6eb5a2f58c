"""Codec failure kinds and result values.

Codec operations report failures as values instead of raising, so the
orchestrator can apply its failure policy without exception handling.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CodecErrorKind(str, Enum):
    UNAVAILABLE = "UNAVAILABLE"
    NOT_ENCODED = "NOT_ENCODED"
    MALFORMED = "MALFORMED"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"


# Reported to callers as a single "cannot decrypt" outcome.
DECODE_FAILURES = frozenset({CodecErrorKind.MALFORMED, CodecErrorKind.AUTHENTICATION_FAILED})


def is_decode_failure(kind: Optional[CodecErrorKind]) -> bool:
    return kind in DECODE_FAILURES


@dataclass(frozen=True)
class CodecResult:
    """Outcome of an encode or decode call.

    Exactly one of ``value`` and ``error`` is set.
    """
    value: Optional[str] = None
    error: Optional[CodecErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: str) -> "CodecResult":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: CodecErrorKind) -> "CodecResult":
        return cls(error=kind)
