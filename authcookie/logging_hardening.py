"""Logging Hardening and Redaction.

This module provides filters to prevent sensitive data (encrypted username
fields and configured secrets) from appearing in application logs.
"""
import logging
import re
from typing import List, Tuple

from authcookie.domain.codec import DEFAULT_MARKER

# 24-byte nonce + 16-byte tag encode to at least 54 base64url characters.
MIN_ENCODED_LENGTH = 54


def build_secret_patterns(marker: str = DEFAULT_MARKER) -> List[Tuple["re.Pattern[str]", str]]:
    return [
        (re.compile(re.escape(marker) + r"[A-Za-z0-9_-]{%d,}" % MIN_ENCODED_LENGTH), marker + "[REDACTED]"),
        # Also catch keyword-based assignments
        (re.compile(r"(AUTH_COOKIE_(?:PREVIOUS_)?KEYS?=)\S+"), r"\1[REDACTED]"),
    ]


class CookieRedactionFilter(logging.Filter):
    """Filter that redacts secret-like patterns from log records."""

    def __init__(self, marker: str = DEFAULT_MARKER):
        super().__init__()
        self.patterns = build_secret_patterns(marker)

    def _redact(self, text: str) -> str:
        for pattern, replacement in self.patterns:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not isinstance(record.msg, str):
            return True

        record.msg = self._redact(record.msg)

        # Also redact arguments if they are strings
        if isinstance(record.args, tuple) and record.args:
            record.args = tuple(
                self._redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )

        return True


def setup_logging_redaction(marker: str = DEFAULT_MARKER) -> None:
    """Apply the CookieRedactionFilter to the root logger and package loggers."""
    redact_filter = CookieRedactionFilter(marker)

    root_logger = logging.getLogger()

    # Remove existing filters if any (to avoid duplicates)
    for f in root_logger.filters[:]:
        if isinstance(f, CookieRedactionFilter):
            root_logger.removeFilter(f)

    root_logger.addFilter(redact_filter)

    # Logger filters do not apply to records propagated from child loggers
    for name in list(logging.root.manager.loggerDict):
        if not name.startswith("authcookie"):
            continue
        logger = logging.getLogger(name)
        for f in logger.filters[:]:
            if isinstance(f, CookieRedactionFilter):
                logger.removeFilter(f)
        logger.addFilter(redact_filter)

    logging.info("Logging redaction filters active.")
