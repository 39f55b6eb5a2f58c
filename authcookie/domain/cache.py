"""Process-local memo of encoded field -> decrypted username."""
import logging
import threading
from collections import OrderedDict
from typing import Optional

logger = logging.getLogger(__name__)


class DecodeCache:
    """Thread-safe decode cache owned by the orchestrator.

    Entries live for the lifetime of the process. With ``max_entries`` unset
    the cache never evicts, which lets it grow without limit under cookie
    churn; set a bound to get least-recently-used eviction instead.
    Only successful decodes are inserted.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, str]" = OrderedDict()
        self._lock = threading.Lock()

    def lookup(self, field: str) -> Optional[str]:
        with self._lock:
            plaintext = self._entries.get(field)
            if plaintext is not None and self.max_entries is not None:
                self._entries.move_to_end(field)
            return plaintext

    def insert(self, field: str, plaintext: str) -> None:
        with self._lock:
            self._entries[field] = plaintext
            if self.max_entries is None:
                return
            self._entries.move_to_end(field)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, field: str) -> bool:
        with self._lock:
            return field in self._entries
