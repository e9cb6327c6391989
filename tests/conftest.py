"""Pytest configuration for masking resolver tests."""

import logging
import sys
import zipfile
from pathlib import Path

import pytest

# Allow running the tests from a checkout without installing the package
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))


def pom_properties(group_id: str, artifact_id: str, version: str = "1.0") -> str:
    return (
        "#Generated by Maven\n"
        "#Tue Jan 10 12:00:00 UTC 2012\n"
        f"version={version}\n"
        f"groupId={group_id}\n"
        f"artifactId={artifact_id}\n"
    )


def write_archive(
    path: Path,
    entries: dict[str, str | bytes],
    library: tuple[str, str] | None = None,
) -> Path:
    """Write a zip archive, optionally embedding Maven packaging metadata."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        if library is not None:
            group_id, artifact_id = library
            zf.writestr(f"META-INF/maven/{group_id}/{artifact_id}/", "")
            zf.writestr(
                f"META-INF/maven/{group_id}/{artifact_id}/pom.properties",
                pom_properties(group_id, artifact_id),
            )
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


def mark_entry_encrypted(path: Path, entry: str) -> None:
    """Set the encryption flag of an entry in the central directory."""
    data = bytearray(path.read_bytes())
    name = entry.encode()
    pos = data.find(b"PK\x01\x02")
    while pos != -1:
        name_len = int.from_bytes(data[pos + 28 : pos + 30], "little")
        if bytes(data[pos + 46 : pos + 46 + name_len]) == name:
            flags = int.from_bytes(data[pos + 8 : pos + 10], "little") | 0x1
            data[pos + 8 : pos + 10] = flags.to_bytes(2, "little")
            path.write_bytes(bytes(data))
            return
        pos = data.find(b"PK\x01\x02", pos + 4)
    raise KeyError(entry)


def corrupt_entry_data(path: Path, entry: str) -> None:
    """Overwrite the start of a deflated entry with an invalid block header."""
    with zipfile.ZipFile(path) as zf:
        info = zf.getinfo(entry)
    data = bytearray(path.read_bytes())
    offset = info.header_offset
    name_len = int.from_bytes(data[offset + 26 : offset + 28], "little")
    extra_len = int.from_bytes(data[offset + 28 : offset + 30], "little")
    start = offset + 30 + name_len + extra_len
    data[start : start + 8] = b"\xff" * 8
    path.write_bytes(bytes(data))


def write_deflated_metadata(path: Path, group_id: str, artifact_id: str) -> str:
    """Write an archive whose metadata entry is deflate-compressed. Returns the entry name."""
    entry = f"META-INF/maven/{group_id}/{artifact_id}/pom.properties"
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(entry, pom_properties(group_id, artifact_id) * 20)
        zf.writestr("a/x.txt", "payload\n")
    return entry


@pytest.fixture
def make_archive(tmp_path):
    """Factory fixture: make_archive("guava.jar", {...}, library=("g", "a"))."""

    def _make(name: str, entries: dict[str, str | bytes], library: tuple[str, str] | None = None) -> Path:
        return write_archive(tmp_path / "archives" / name, entries, library)

    return _make


@pytest.fixture
def guava_jar(make_archive):
    return make_archive(
        "guava-11.0.1.jar",
        {
            "com/google/common/collect/ArrayListMultimap.py": "KIND = 'multimap'\n",
            "com/google/common/__init__.py": "",
            "shared/config.txt": "from guava\n",
        },
        library=("com.google.guava", "guava"),
    )


@pytest.fixture
def plain_dir(tmp_path):
    """Loose (non-archived) search path directory."""
    root = tmp_path / "classes"
    (root / "com" / "example").mkdir(parents=True)
    (root / "com" / "example" / "Secret.py").write_text("VALUE = 'secret'\n")
    (root / "com" / "example" / "SecretImpl.py").write_text("VALUE = 'impl'\n")
    (root / "com" / "example" / "Public.py").write_text("VALUE = 'public'\n")
    (root / "com" / "google" / "common" / "collect").mkdir(parents=True)
    (root / "com" / "google" / "common" / "collect" / "Loose.py").write_text("VALUE = 'loose'\n")
    (root / "shared").mkdir()
    (root / "shared" / "config.txt").write_text("from dir\n")
    return root


@pytest.fixture
def restore_root_logger():
    """Undo handlers and level changes made to the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def encrypted_jar(tmp_path):
    """Archive whose metadata entry claims to be encrypted."""
    path = tmp_path / "archives" / "encrypted.jar"
    path.parent.mkdir(parents=True, exist_ok=True)
    entry = write_deflated_metadata(path, "com.google.guava", "guava")
    mark_entry_encrypted(path, entry)
    return path


@pytest.fixture
def corrupt_jar(tmp_path):
    """Archive whose metadata entry holds a broken deflate stream."""
    path = tmp_path / "archives" / "corrupt.jar"
    path.parent.mkdir(parents=True, exist_ok=True)
    entry = write_deflated_metadata(path, "com.google.guava", "guava")
    corrupt_entry_data(path, entry)
    return path
