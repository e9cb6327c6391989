"""Masking module resolver.

Wraps a module resolver and hides modules and resources by name prefix or
by the packaged library (archive) that supplies them.
"""

from .cache import AttributionCache
from .cache import LruEviction
from .cache import NoEviction
from .identifier import LibraryIdentifier
from .importer import MaskingFinder
from .library import VOID
from .library import LibraryDef
from .mask_list import parse_library_masks
from .mask_list import read_library_masks
from .registry import MaskRegistry
from .resolver import MaskingResolver
from .resolver import Origin
from .sources import ModuleResolver
from .sources import ResolvedModule
from .sources import SearchPathResolver

__all__ = [
    "AttributionCache",
    "LibraryDef",
    "LibraryIdentifier",
    "LruEviction",
    "MaskRegistry",
    "MaskingFinder",
    "MaskingResolver",
    "ModuleResolver",
    "NoEviction",
    "Origin",
    "ResolvedModule",
    "SearchPathResolver",
    "VOID",
    "parse_library_masks",
    "read_library_masks",
]
