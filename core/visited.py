"""
Thread-safe record of targets already dispatched during a run
"""

from threading import Lock


class VisitedSet:
    """Set of dispatched targets with atomic test-and-set"""

    def __init__(self):
        self._lock = Lock()
        self._seen = set()

    def try_mark(self, target: str) -> bool:
        """Mark target as visited. True only for the first caller"""
        with self._lock:
            if target in self._seen:
                return False
            self._seen.add(target)
            return True

    def __contains__(self, target) -> bool:
        with self._lock:
            return target in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
