"""Mask registry - name, resource and library masks.

All collections are append-only. Writers replace the stored tuple under a
lock (copy-on-write); readers grab the current tuple without locking, so a
lookup sees either the state before or after an add, never a partial entry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from .library import LibraryDef

logger = logging.getLogger(__name__)


def to_resource_prefix(prefix: str) -> str:
    """Convert a dotted name prefix to its ``/``-separated resource form."""
    return prefix.replace(".", "/")


class MaskRegistry:
    """Holds the masks applied by a MaskingResolver."""

    def __init__(self, name_masks: Iterable[str] = ()):
        self._lock = threading.Lock()
        # (name prefix, resource prefix) pairs keep both views in lockstep
        self._prefixes: tuple[tuple[str, str], ...] = ()
        self._libraries: tuple[LibraryDef, ...] = ()
        for prefix in name_masks:
            self.add_name_mask(prefix)

    @property
    def name_prefixes(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self._prefixes)

    @property
    def resource_prefixes(self) -> tuple[str, ...]:
        return tuple(resource for _, resource in self._prefixes)

    @property
    def library_masks(self) -> tuple[LibraryDef, ...]:
        return self._libraries

    def add_name_mask(self, prefix: str | None) -> None:
        """Mask every name starting with ``prefix`` (and its resource form)."""
        if prefix is None:
            return
        entry = (prefix, to_resource_prefix(prefix))
        with self._lock:
            self._prefixes = (*self._prefixes, entry)
        logger.debug(f"Added name mask: {prefix}")

    def add_library_masks(self, entries: Iterable[LibraryDef]) -> int:
        """Append library masks, skipping VOID entries.

        Returns:
            Number of masks added
        """
        accepted = tuple(lib for lib in entries if lib is not None and not lib.is_void())
        if not accepted:
            return 0
        with self._lock:
            self._libraries = (*self._libraries, *accepted)
        logger.debug(f"Added {len(accepted)} library mask(s)")
        return len(accepted)

    def is_name_masked(self, name: str) -> bool:
        return any(name.startswith(prefix) for prefix, _ in self._prefixes)

    def is_resource_masked(self, path: str) -> bool:
        return any(path.startswith(prefix) for _, prefix in self._prefixes)

    def matches_library_mask(self, lib: LibraryDef | None) -> bool:
        """Check whether ``lib`` is covered by any library mask.

        VOID never matches; an unattributed archive is not a masked one.
        """
        if lib is None or lib.is_void():
            return False
        return any(mask.matches(lib) for mask in self._libraries)

    def __repr__(self) -> str:
        return f"MaskRegistry(prefixes={list(self.name_prefixes)}, libraries={[str(m) for m in self._libraries]})"


__all__ = ["MaskRegistry", "to_resource_prefix"]
