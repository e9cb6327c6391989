"""Tests for LibraryDef matching and parsing."""

from masking_resolver.library import VOID
from masking_resolver.library import LibraryDef


class TestMatching:
    def test_same_group_and_artifact_match(self):
        assert LibraryDef("com.google.guava", "guava") == LibraryDef("com.google.guava", "guava")

    def test_different_group_does_not_match(self):
        assert LibraryDef("com.google.guava", "guava") != LibraryDef("org.fork", "guava")

    def test_missing_group_matches_any_group(self):
        mask = LibraryDef(None, "guava")
        assert mask == LibraryDef("com.google.guava", "guava")
        assert LibraryDef("org.fork", "guava") == mask

    def test_empty_group_matches_any_group(self):
        assert LibraryDef("", "guava") == LibraryDef("com.google.guava", "guava")

    def test_different_artifact_never_matches(self):
        assert LibraryDef(None, "guava") != LibraryDef("com.google.guava", "guava-testlib")
        assert LibraryDef("com.google.guava", "guava") != LibraryDef("com.google.guava", "failureaccess")

    def test_matching_libraries_hash_equal(self):
        assert hash(LibraryDef(None, "guava")) == hash(LibraryDef("com.google.guava", "guava"))

    def test_not_equal_to_other_types(self):
        assert LibraryDef(None, "guava") != "guava"

    def test_void(self):
        assert VOID.is_void()
        assert not LibraryDef(None, "guava").is_void()
        assert VOID != LibraryDef(None, "guava")

    def test_str(self):
        assert str(LibraryDef("com.google.guava", "guava")) == "com.google.guava:guava"
        assert str(LibraryDef(None, "guava")) == "guava"


class TestFromLine:
    def test_group_and_artifact(self):
        lib = LibraryDef.from_line("com.google.guava:guava")
        assert lib.group_id == "com.google.guava"
        assert lib.artifact_id == "guava"

    def test_bare_artifact(self):
        lib = LibraryDef.from_line("  guava  ")
        assert lib.group_id is None
        assert lib.artifact_id == "guava"

    def test_extra_coordinates_ignored(self):
        lib = LibraryDef.from_line("com.google.guava:guava:11.0.1")
        assert lib.artifact_id == "guava"

    def test_blank_is_void(self):
        assert LibraryDef.from_line("   ") is VOID

    def test_missing_artifact_is_void(self):
        assert LibraryDef.from_line("com.google.guava:") is VOID


class TestFromProperties:
    def test_reads_coordinates(self):
        lib = LibraryDef.from_properties({"groupId": "org.slf4j", "artifactId": "slf4j-api", "version": "1.7"})
        assert lib.group_id == "org.slf4j"
        assert lib.artifact_id == "slf4j-api"

    def test_missing_group(self):
        lib = LibraryDef.from_properties({"artifactId": "slf4j-api"})
        assert lib.group_id is None
        assert lib.artifact_id == "slf4j-api"

    def test_missing_artifact_is_void(self):
        assert LibraryDef.from_properties({"groupId": "org.slf4j"}) is VOID
