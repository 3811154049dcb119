# shoescrape/pipeline/visited.py
import threading
from typing import Set


class VisitedSet:
    """Identifiers already dispatched during one keyword's crawl. In memory only."""

    def __init__(self):
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def mark_if_new(self, identifier: str) -> bool:
        """True the first time `identifier` is seen, False on every later call."""
        with self._lock:
            if identifier in self._seen:
                return False
            self._seen.add(identifier)
            return True

    def __contains__(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
