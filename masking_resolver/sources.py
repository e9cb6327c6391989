"""Module resolvers that can be wrapped by a MaskingResolver.

- ModuleResolver: protocol every resolver implements
- SearchPathResolver: resolves against directories and zip archives,
  parent-first, the way ``sys.path`` entries are searched
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterable
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from types import CodeType
from typing import Protocol
from typing import runtime_checkable

from .identifier import archive_location
from .identifier import file_location
from .identifier import path_from_file_url
from .identifier import split_archive_location

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".py"
PACKAGE_INIT = "__init__.py"


@dataclass
class ResolvedModule:
    """A module found by a resolver."""

    name: str
    location: str
    source: bytes
    is_package: bool = False
    code: CodeType | None = None


@runtime_checkable
class ModuleResolver(Protocol):
    """Resolution service: modules by dotted name, resources by path."""

    def resolve_module(self, name: str, finalize: bool = False) -> ResolvedModule | None: ...

    def locate_resource(self, name: str) -> str | None: ...

    def enumerate_resources(self, name: str) -> list[str]: ...


def module_resource_name(name: str, package: bool = False) -> str:
    """Resource path holding a module's source.

    Example: ``a.b.C`` -> ``a/b/C.py`` (or ``a/b/C/__init__.py`` for packages)
    """
    base = name.replace(".", "/")
    if package:
        return f"{base}/{PACKAGE_INIT}"
    return base + SOURCE_SUFFIX


def module_resource_names(name: str) -> tuple[str, str]:
    """Candidate resource paths for a module, plain module first."""
    return module_resource_name(name), module_resource_name(name, package=True)


def read_location(location: str) -> bytes:
    """Read the bytes behind a resource location.

    Raises:
        FileNotFoundError: Location does not exist
        ValueError: Unsupported location scheme
    """
    parts = split_archive_location(location)
    if parts is not None:
        archive_url, entry = parts
        archive_path = path_from_file_url(archive_url)
        if archive_path is None:
            raise ValueError(f"Unsupported archive location: {location}")
        with zipfile.ZipFile(archive_path) as zf:
            try:
                return zf.read(entry)
            except KeyError:
                raise FileNotFoundError(f"{entry} not found in {archive_path}") from None

    path = path_from_file_url(location)
    if path is None:
        raise ValueError(f"Unsupported location: {location}")
    return path.read_bytes()


class SearchPathResolver:
    """Resolves modules and resources against an ordered search path.

    Entries are directories or zip archives (jar, wheel, zip). An optional
    parent resolver is consulted first.
    """

    def __init__(self, entries: Iterable[str | Path], parent: ModuleResolver | None = None):
        """Initialize resolver.

        Args:
            entries: Directories and archives, searched in order
            parent: Resolver consulted before this one's own entries
        """
        self.entries = [Path(entry) for entry in entries]
        self.parent = parent

    def _archive_contains(self, archive: Path, name: str) -> bool:
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.getinfo(name)
                return True
        except KeyError:
            return False
        except (OSError, zipfile.BadZipFile) as e:
            logger.debug(f"Skipping unreadable search path entry {archive}: {e}")
            return False

    def _own_locations(self, name: str) -> Iterator[str]:
        name = name.lstrip("/")
        if not name:
            return

        for entry in self.entries:
            if entry.is_dir():
                candidate = entry / name
                if candidate.is_file():
                    yield file_location(candidate)
            elif entry.is_file() and self._archive_contains(entry, name):
                yield archive_location(entry, name)

    def locate_resource(self, name: str) -> str | None:
        if self.parent is not None:
            location = self.parent.locate_resource(name)
            if location is not None:
                return location
        return next(self._own_locations(name), None)

    def enumerate_resources(self, name: str) -> list[str]:
        locations = list(self.parent.enumerate_resources(name)) if self.parent is not None else []
        locations.extend(self._own_locations(name))
        return locations

    def resolve_module(self, name: str, finalize: bool = False) -> ResolvedModule | None:
        """Resolve a module by dotted name.

        Candidates are tried in order (module file, then package init), each
        through the whole parent-first chain, the same order
        MaskingResolver.module_origin judges them in.

        Args:
            name: Dotted module name
            finalize: Also compile the source into a code object

        Returns:
            ResolvedModule, or None if no entry provides the module
        """
        for resource in module_resource_names(name):
            location = self.locate_resource(resource)
            if location is None:
                continue

            source = read_location(location)
            resolved = ResolvedModule(
                name=name,
                location=location,
                source=source,
                is_package=resource.endswith("/" + PACKAGE_INIT),
            )
            if finalize:
                resolved.code = compile(source, location, "exec")
            logger.debug(f"[resolve] {name} -> {location}")
            return resolved

        return None

    def __repr__(self) -> str:
        return f"SearchPathResolver({[str(e) for e in self.entries]})"


__all__ = [
    "ModuleResolver",
    "ResolvedModule",
    "SearchPathResolver",
    "module_resource_name",
    "module_resource_names",
    "read_location",
]
