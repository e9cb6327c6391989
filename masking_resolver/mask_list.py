"""Mask-list loading.

Format (UTF-8, one entry per line):

    # comment
    com.google.guava:guava
    commons-lang

``group:artifact`` masks exactly that library; a bare ``artifact`` masks the
artifact in any group.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from importlib import resources
from pathlib import Path

from .library import LibraryDef

logger = logging.getLogger(__name__)

MASKS_PACKAGE = "masking_resolver"
MASKS_DIR = "masks"


def parse_library_masks(lines: Iterable[str]) -> list[LibraryDef]:
    """Parse mask-list lines, skipping comments, blanks and unusable entries."""
    masks = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        lib = LibraryDef.from_line(line)
        if lib.is_void():
            logger.debug(f"Ignoring unparsable mask entry: {line!r}")
            continue
        masks.append(lib)
    return masks


def _namespaced_location(resource: str):
    return resources.files(MASKS_PACKAGE).joinpath(MASKS_DIR, resource)


def read_library_masks(resource: str) -> list[LibraryDef]:
    """Read library masks from every location providing ``resource``.

    Lookup order:
    1. Bundled ``masking_resolver/masks/<resource>`` (skipped for absolute names)
    2. ``resource`` as a filesystem path

    Missing files are skipped silently; read failures are logged and
    loading continues with the remaining locations.

    Args:
        resource: Mask-list name or path

    Returns:
        Library masks in file order
    """
    locations = []
    if not resource.startswith("/"):
        locations.append(_namespaced_location(resource))
    locations.append(Path(resource))

    masks: list[LibraryDef] = []
    for location in locations:
        try:
            if not location.is_file():
                continue
            text = location.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to load library masks from {location}: {e}")
            continue

        parsed = parse_library_masks(text.splitlines())
        logger.debug(f"Loaded {len(parsed)} library mask(s) from {location}")
        masks.extend(parsed)

    return masks


__all__ = ["parse_library_masks", "read_library_masks"]
