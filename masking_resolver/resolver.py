"""Masking resolver - hides modules and resources from a parent resolver.

Masks come in two kinds:
- Name prefixes: ``com.example.Secret`` hides ``com.example.Secret*`` modules
  and ``com/example/Secret*`` resources, with no I/O
- Library masks: hide anything served from an archive whose packaging
  metadata identifies a masked library

Masked and absent are deliberately indistinguishable: both come back as
None (or an empty list).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from .cache import AttributionCache
from .identifier import LibraryIdentifier
from .identifier import archive_key_from_location
from .library import LibraryDef
from .mask_list import read_library_masks
from .registry import MaskRegistry
from .sources import ModuleResolver
from .sources import ResolvedModule
from .sources import module_resource_names

logger = logging.getLogger(__name__)


class Origin(Enum):
    """Whether a resource comes from a masked library.

    INDETERMINATE covers resources that are not served from an archive;
    callers treat it as visible.
    """

    MASKED = "masked"
    NOT_MASKED = "not_masked"
    INDETERMINATE = "indeterminate"


class MaskingResolver:
    """Decorator over a ModuleResolver that removes masked entries.

    Never adds or reorders what the parent returns.
    """

    def __init__(
        self,
        parent: ModuleResolver,
        masks: Iterable[str] = (),
        *,
        identifier: LibraryIdentifier | None = None,
        cache: AttributionCache | None = None,
    ):
        """Initialize resolver.

        Args:
            parent: Resolver being wrapped
            masks: Initial name prefixes to hide
            identifier: Archive identifier for the default cache
            cache: Attribution cache (defaults to an LRU-bounded cache over identifier)

        Raises:
            ValueError: Both identifier and cache given (the cache already
                        carries its own compute function)
        """
        if identifier is not None and cache is not None:
            raise ValueError("Pass either identifier or cache, not both")

        self.parent = parent
        self.registry = MaskRegistry(masks)
        if cache is None:
            cache = AttributionCache((identifier or LibraryIdentifier()).identify)
        self.cache = cache

    # ===== MASK MANAGEMENT =====

    def add_mask(self, prefix: str | None) -> None:
        """Hide every module/resource starting with ``prefix`` from now on."""
        self.registry.add_name_mask(prefix)

    def add_library_masks(self, entries: Iterable[LibraryDef]) -> int:
        """Hide resources served from archives of these libraries (VOID entries skipped).

        Returns:
            Number of masks added
        """
        return self.registry.add_library_masks(entries)

    def load_library_masks(self, resource: str) -> MaskingResolver:
        """Load library masks from a mask-list resource.

        Returns:
            self, for chaining
        """
        self.registry.add_library_masks(read_library_masks(resource))
        return self

    def evict_cache(self) -> None:
        """Drop every cached archive attribution."""
        self.cache.clear()

    # ===== ORIGIN =====

    def location_origin(self, location: str) -> Origin:
        """Decide whether a located resource comes from a masked library."""
        archive_key = archive_key_from_location(location)
        if archive_key is None:
            return Origin.INDETERMINATE

        lib = self.cache.get_or_compute(archive_key)
        if self.registry.matches_library_mask(lib):
            logger.debug(f"[mask] {location} is packaged by masked library {lib}")
            return Origin.MASKED
        return Origin.NOT_MASKED

    def resource_origin(self, name: str) -> Origin:
        """Decide whether the resource the parent would serve for ``name`` is masked."""
        location = self.parent.locate_resource(name)
        if location is None:
            return Origin.NOT_MASKED
        return self.location_origin(location)

    def module_origin(self, name: str) -> Origin:
        """Origin of the resource holding module ``name`` (module file or package init)."""
        for resource in module_resource_names(name):
            location = self.parent.locate_resource(resource)
            if location is not None:
                return self.location_origin(location)
        return Origin.NOT_MASKED

    # ===== RESOLUTION =====

    def resolve_module(self, name: str, finalize: bool = False) -> ResolvedModule | None:
        if self.registry.is_name_masked(name):
            logger.debug(f"[mask] {name} hidden by name mask")
            return None

        if self.module_origin(name) is Origin.MASKED:
            return None

        return self.parent.resolve_module(name, finalize)

    def require_module(self, name: str, finalize: bool = False) -> ResolvedModule:
        """Resolve a module or raise ModuleNotFoundError (masked or absent alike)."""
        resolved = self.resolve_module(name, finalize)
        if resolved is None:
            raise ModuleNotFoundError(f"No module named {name!r}", name=name)
        return resolved

    def locate_resource(self, name: str) -> str | None:
        if self.registry.is_resource_masked(name):
            logger.debug(f"[mask] {name} hidden by resource mask")
            return None

        if self.resource_origin(name) is Origin.MASKED:
            return None

        return self.parent.locate_resource(name)

    def enumerate_resources(self, name: str) -> list[str]:
        if self.registry.is_resource_masked(name):
            return []

        # Same-named resources can come from different archives, so judge each one
        return [
            location
            for location in self.parent.enumerate_resources(name)
            if self.location_origin(location) is not Origin.MASKED
        ]

    def __repr__(self) -> str:
        return f"MaskingResolver({self.parent!r}, {self.registry!r})"


__all__ = ["MaskingResolver", "Origin"]
