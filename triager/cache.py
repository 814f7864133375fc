"""Issue-version cache used by the change detector."""

import logging
import threading
from collections import OrderedDict
from typing import Protocol

logger = logging.getLogger(__name__)


class CacheError(Exception):
    """The cache backend could not serve a read or write."""


class VersionCache(Protocol):
    """Maps an issue id to the last ``updated_at`` seen for it."""

    name: str

    def get(self, issue_id: int) -> str | None: ...

    def put(self, issue_id: int, version: str) -> None: ...


class InMemoryVersionCache:
    """Bounded, thread-safe LRU map of issue id -> last seen version.

    Evicting an entry only means the issue is reported as NEW the next time it
    is seen.
    """

    def __init__(self, name: str = "issues", max_entries: int = 10_000) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.name = name
        self.max_entries = max_entries
        self._entries: OrderedDict[int, str] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, issue_id: int) -> str | None:
        with self._lock:
            version = self._entries.get(issue_id)
            if version is not None:
                self._entries.move_to_end(issue_id)
            return version

    def put(self, issue_id: int, version: str) -> None:
        with self._lock:
            self._entries[issue_id] = version
            self._entries.move_to_end(issue_id)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted issue #%s from cache %r", evicted, self.name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, issue_id: object) -> bool:
        with self._lock:
            return issue_id in self._entries

    def __repr__(self) -> str:
        return f"InMemoryVersionCache(name={self.name!r}, max_entries={self.max_entries})"
