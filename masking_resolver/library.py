"""Library identity used to attribute resources to packaged archives.

A LibraryDef names the group/artifact pair of a packaged library. Matching
is intentionally looser than structural equality: a definition without a
group matches that artifact in any group.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class LibraryDef:
    """Identity of a packaged library.

    Attributes:
        group_id: Group the artifact is published under (None/"" = any group)
        artifact_id: Artifact name
    """

    group_id: str | None
    artifact_id: str

    def matches(self, other: LibraryDef) -> bool:
        """Check whether two definitions name the same library.

        Artifacts must be equal. Groups are only compared when both sides
        specify one.
        """
        if self.group_id and other.group_id and self.group_id != other.group_id:
            return False
        return self.artifact_id == other.artifact_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LibraryDef):
            return NotImplemented
        return self.matches(other)

    def __hash__(self) -> int:
        # Only artifact_id participates in matching unconditionally
        return hash(self.artifact_id)

    def is_void(self) -> bool:
        return self is VOID or (not self.group_id and not self.artifact_id)

    def __str__(self) -> str:
        if self.group_id:
            return f"{self.group_id}:{self.artifact_id}"
        return self.artifact_id

    @classmethod
    def from_line(cls, line: str) -> LibraryDef:
        """Parse a mask-list entry.

        Format: ``group:artifact`` or a bare ``artifact``.

        Args:
            line: Entry text (already stripped of comments)

        Returns:
            Parsed LibraryDef, or VOID when nothing usable is present
        """
        line = line.strip()
        if not line:
            return VOID

        if ":" in line:
            group_id, _, rest = line.partition(":")
            artifact_id = rest.split(":", 1)[0].strip()
            if not artifact_id:
                return VOID
            return cls(group_id.strip() or None, artifact_id)

        return cls(None, line)

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> LibraryDef:
        """Build a definition from parsed packaging metadata.

        Args:
            properties: Key/value pairs containing ``groupId`` and ``artifactId``

        Returns:
            LibraryDef, or VOID if no artifact is declared
        """
        artifact_id = (properties.get("artifactId") or "").strip()
        if not artifact_id:
            return VOID
        group_id = (properties.get("groupId") or "").strip()
        return cls(group_id or None, artifact_id)


VOID = LibraryDef("", "")

__all__ = ["LibraryDef", "VOID"]
