"""Archive attribution cache.

Maps archive keys (archive URLs) to the LibraryDef they package. Entries can
be dropped at any time by the eviction policy; a miss simply recomputes.

Contract:
- Never stores None (unattributable archives cache VOID)
- Lookups never fail because of eviction
- Identification runs outside the lock; racing misses on the same key
  compute the same value and the last write wins
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import Protocol

from .identifier import LibraryIdentifier
from .library import LibraryDef

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1024


class EvictionPolicy(Protocol):
    """Decides which entries to drop after an insert.

    Called with the cache lock held.
    """

    def touch(self, entries: OrderedDict[str, LibraryDef], key: str) -> None: ...

    def evict(self, entries: OrderedDict[str, LibraryDef]) -> list[str]: ...


class LruEviction:
    """Capacity-bounded least-recently-used eviction."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries

    def touch(self, entries: OrderedDict[str, LibraryDef], key: str) -> None:
        entries.move_to_end(key)

    def evict(self, entries: OrderedDict[str, LibraryDef]) -> list[str]:
        evicted = []
        while len(entries) > self.max_entries:
            key, _ = entries.popitem(last=False)
            evicted.append(key)
        return evicted

    def __repr__(self) -> str:
        return f"LruEviction(max_entries={self.max_entries})"


class NoEviction:
    """Keeps every entry until cleared explicitly."""

    def touch(self, entries: OrderedDict[str, LibraryDef], key: str) -> None:
        pass

    def evict(self, entries: OrderedDict[str, LibraryDef]) -> list[str]:
        return []

    def __repr__(self) -> str:
        return "NoEviction()"


class AttributionCache:
    """Thread-safe archive -> LibraryDef cache."""

    def __init__(
        self,
        compute: Callable[[str], LibraryDef] | None = None,
        policy: EvictionPolicy | None = None,
    ):
        """Initialize cache.

        Args:
            compute: Function producing the value on a miss
                     (defaults to LibraryIdentifier().identify)
            policy: Eviction policy (defaults to LruEviction)
        """
        self._compute = compute or LibraryIdentifier().identify
        self.policy: EvictionPolicy = policy if policy is not None else LruEviction()
        self._entries: OrderedDict[str, LibraryDef] = OrderedDict()
        self._lock = threading.Lock()

    def get_or_compute(self, key: str) -> LibraryDef:
        """Return the cached attribution for ``key``, computing it on a miss."""
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self.policy.touch(self._entries, key)
                return cached

        value = self._compute(key)

        with self._lock:
            self._entries[key] = value
            self.policy.touch(self._entries, key)
            evicted = self.policy.evict(self._entries)

        if evicted:
            logger.debug(f"Evicted {len(evicted)} attribution(s)")
        return value

    def evict(self, key: str) -> bool:
        """Drop a single entry. Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop every entry (e.g. in response to memory pressure)."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"AttributionCache({len(self)} entries, {self.policy!r})"


__all__ = ["AttributionCache", "EvictionPolicy", "LruEviction", "NoEviction", "DEFAULT_MAX_ENTRIES"]
