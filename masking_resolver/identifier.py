"""Attribution of archives to the libraries they package.

Archives built by Maven-compatible tooling embed their coordinates under
``META-INF/maven/<group>/<artifact>/pom.properties``. LibraryIdentifier
scans an archive for that entry and turns it into a LibraryDef.

Location encoding:
- Loose resource:   ``file:///abs/dir/pkg/mod.py``
- Archive resource: ``jar:file:///abs/lib.jar!/pkg/mod.py``
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from .library import VOID
from .library import LibraryDef
from .properties import parse_properties

logger = logging.getLogger(__name__)

ARCHIVE_SCHEMES = ("jar", "zip")
ARCHIVE_SEPARATOR = "!/"

DEFAULT_METADATA_PREFIX = "META-INF/maven"
DEFAULT_METADATA_SUFFIX = "pom.properties"


def file_location(path: str | Path) -> str:
    """Encode a loose filesystem resource as a ``file:`` URL."""
    return Path(path).resolve().as_uri()


def archive_location(archive_path: str | Path, entry: str) -> str:
    """Encode a resource stored inside an archive.

    Args:
        archive_path: Path of the archive on disk
        entry: Entry name inside the archive (``/``-separated)

    Returns:
        Location of the form ``jar:<archive-url>!/<entry>``
    """
    return f"jar:{file_location(archive_path)}{ARCHIVE_SEPARATOR}{entry.lstrip('/')}"


def split_archive_location(location: str) -> tuple[str, str] | None:
    """Split an archive location into ``(archive_url, entry)``.

    Returns:
        Tuple of archive URL and entry name, or None if the location does
        not point inside an archive
    """
    scheme, sep, rest = location.partition(":")
    if not sep or scheme.lower() not in ARCHIVE_SCHEMES or "!" not in rest:
        return None

    archive_url, _, entry = rest.partition("!")
    return archive_url, entry.lstrip("/")


def archive_key_from_location(location: str) -> str | None:
    """Recover the archive's own URL from a resource location.

    Example:
        ``jar:file:///repo/guava-11.0.1.jar!/com/google/Foo.class``
        -> ``file:///repo/guava-11.0.1.jar``
    """
    parts = split_archive_location(location)
    if parts is None:
        return None
    return parts[0]


def path_from_file_url(url: str) -> Path | None:
    """Convert a ``file:`` URL (or plain path) to a filesystem path.

    Returns:
        Path, or None for any other URL scheme
    """
    parts = urlsplit(url)
    if parts.scheme.lower() == "file":
        return Path(url2pathname(parts.path))
    # Bare path, including Windows drive letters parsed as a one-letter scheme
    if not parts.scheme or len(parts.scheme) == 1:
        return Path(url)
    return None


class LibraryIdentifier:
    """Determines which library an archive packages.

    Each call opens its own handle on the archive, so concurrent calls on
    different archives never share state.
    """

    def __init__(
        self,
        metadata_prefix: str = DEFAULT_METADATA_PREFIX,
        metadata_suffix: str = DEFAULT_METADATA_SUFFIX,
    ):
        """Initialize identifier.

        Args:
            metadata_prefix: Entry name prefix of the packaging metadata directory
            metadata_suffix: Entry name suffix of the metadata properties file
        """
        self.metadata_prefix = metadata_prefix
        self.metadata_suffix = metadata_suffix

    def is_metadata_entry(self, info: zipfile.ZipInfo) -> bool:
        return (
            not info.is_dir()
            and info.filename.startswith(self.metadata_prefix)
            and info.filename.endswith(self.metadata_suffix)
        )

    def identify(self, archive: str | Path) -> LibraryDef:
        """Identify the library packaged by an archive.

        Args:
            archive: Archive URL (``file:`` scheme) or filesystem path

        Returns:
            LibraryDef from the first metadata entry found, or VOID when the
            archive cannot be attributed
        """
        path = archive if isinstance(archive, Path) else path_from_file_url(archive)
        if path is None:
            logger.debug(f"Cannot attribute non-file archive: {archive}")
            return VOID

        try:
            with zipfile.ZipFile(path) as zf:
                entry = next((info for info in zf.infolist() if self.is_metadata_entry(info)), None)
                if entry is None:
                    logger.debug(f"No packaging metadata in {path}")
                    return VOID
                payload = zf.read(entry)
        except (OSError, EOFError, RuntimeError, NotImplementedError, zipfile.BadZipFile, zlib.error) as e:
            # RuntimeError: encrypted entry; zlib.error: corrupt deflate stream
            logger.debug(f"Could not read archive {path}: {e}")
            return VOID

        try:
            lib = LibraryDef.from_properties(parse_properties(payload))
        except (UnicodeDecodeError, ValueError) as e:
            logger.debug(f"Could not parse {entry.filename} in {path}: {e}")
            return VOID

        logger.debug(f"Attributed {path} to {lib}")
        return lib

    def __repr__(self) -> str:
        return f"LibraryIdentifier({self.metadata_prefix}/**/{self.metadata_suffix})"


__all__ = [
    "ARCHIVE_SCHEMES",
    "LibraryIdentifier",
    "archive_key_from_location",
    "archive_location",
    "file_location",
    "path_from_file_url",
    "split_archive_location",
]
