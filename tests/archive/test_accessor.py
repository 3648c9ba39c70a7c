"""Tests for single-entry archive access."""

from __future__ import annotations

import tempfile
import zipfile
from pathlib import Path

import pytest

from solutiondiff.archive import ArchiveEntryAccessor
from solutiondiff.errors import (
    ArchiveNotFoundError,
    ArchiveReadError,
    CorruptArchiveError,
    MutationError,
)
from tests._fixtures.package_builder import PackageBuilder


@pytest.fixture
def system_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "system-tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


def _scratch_dirs(root: Path) -> list[Path]:
    return [p for p in root.iterdir() if p.name.startswith(ArchiveEntryAccessor.SCRATCH_PREFIX)]


def test_extract_entry_returns_bytes_and_cleans_scratch(
    package_builder: PackageBuilder, system_tmp: Path
) -> None:
    package = package_builder.write("core.zip", "<ImportExportXml />")
    accessor = ArchiveEntryAccessor()

    data = accessor.extract_entry(package, "solution.xml")

    assert data == b"<ImportExportXml />"
    assert _scratch_dirs(system_tmp) == []
    assert _scratch_dirs(package.parent) == []


def test_extract_entry_scratch_defaults_to_system_tmp(
    package_builder: PackageBuilder, system_tmp: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    package = package_builder.write("core.zip", "<a />")
    seen: list[Path] = []
    original_open = Path.open

    def recording_open(self: Path, *args, **kwargs):
        if self.name == "entry.bin":
            seen.append(self.parent.parent)
        return original_open(self, *args, **kwargs)

    monkeypatch.setattr(Path, "open", recording_open)

    assert ArchiveEntryAccessor().extract_entry(package, "solution.xml") == b"<a />"
    assert seen
    assert all(parent == system_tmp for parent in seen)
    assert _scratch_dirs(system_tmp) == []


def test_extract_entry_returns_none_when_entry_absent(
    package_builder: PackageBuilder, system_tmp: Path
) -> None:
    package = package_builder.write("empty.zip", None)
    accessor = ArchiveEntryAccessor()

    assert accessor.extract_entry(package, "solution.xml") is None
    assert _scratch_dirs(system_tmp) == []


def test_extract_entry_matches_nested_entry_by_file_name(package_builder: PackageBuilder) -> None:
    package = package_builder.write("nested.zip", None, extra={"Other/solution.xml": "<x />"})
    accessor = ArchiveEntryAccessor()

    assert accessor.extract_entry(package, "solution.xml") == b"<x />"
    assert accessor.extract_entry(package, "Other/solution.xml") == b"<x />"


def test_extract_entry_ignores_partial_file_names(package_builder: PackageBuilder) -> None:
    package = package_builder.write("near.zip", None, extra={"Other/my_solution.xml": "<x />"})

    assert ArchiveEntryAccessor().extract_entry(package, "solution.xml") is None


def test_extract_entry_takes_first_match_in_archive_order(package_builder: PackageBuilder) -> None:
    package = package_builder.write(
        "both.zip", None, extra={"Other/solution.xml": "nested", "solution.xml": "root"}
    )

    assert ArchiveEntryAccessor().extract_entry(package, "solution.xml") == b"nested"


def test_extract_entry_uses_first_duplicate(tmp_path: Path) -> None:
    package = tmp_path / "dupes.zip"
    with pytest.warns(UserWarning):
        with zipfile.ZipFile(package, "w") as bundle:
            bundle.writestr("solution.xml", "first")
            bundle.writestr("solution.xml", "second")

    assert ArchiveEntryAccessor().extract_entry(package, "solution.xml") == b"first"


def test_extract_entry_missing_archive(tmp_path: Path) -> None:
    with pytest.raises(ArchiveNotFoundError) as excinfo:
        ArchiveEntryAccessor().extract_entry(tmp_path / "nope.zip", "solution.xml")
    assert "nope.zip" in str(excinfo.value)


def test_extract_entry_corrupt_archive_cleans_scratch(tmp_path: Path, system_tmp: Path) -> None:
    bogus = tmp_path / "bogus.zip"
    bogus.write_bytes(b"definitely not a zip")

    with pytest.raises(CorruptArchiveError):
        ArchiveEntryAccessor().extract_entry(bogus, "solution.xml")
    assert _scratch_dirs(system_tmp) == []


def test_extract_entry_honours_scratch_root(package_builder: PackageBuilder, tmp_path: Path) -> None:
    scratch_root = tmp_path / "scratch"
    package = package_builder.write("core.zip", "<a />")

    accessor = ArchiveEntryAccessor(scratch_root)
    assert accessor.extract_entry(package, "solution.xml") == b"<a />"
    assert list(scratch_root.iterdir()) == []


def test_extract_entry_unusable_scratch_root_raises_read_error(
    package_builder: PackageBuilder, tmp_path: Path
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    package = package_builder.write("core.zip", "<a />")

    with pytest.raises(ArchiveReadError) as excinfo:
        ArchiveEntryAccessor(blocker / "scratch").extract_entry(package, "solution.xml")
    assert "core.zip" in str(excinfo.value)
    assert excinfo.value.detail


def test_replace_entry_swaps_content_and_keeps_other_entries(package_builder: PackageBuilder) -> None:
    package = package_builder.write("core.zip", "old", extra={"Other/data.bin": "payload"})
    before = package_builder.entries(package)

    ArchiveEntryAccessor().replace_entry(package, "solution.xml", b"new")

    assert package_builder.read(package) == b"new"
    assert package_builder.read(package, "Other/data.bin") == b"payload"
    after = package_builder.entries(package)
    assert after == before
    assert after.count("solution.xml") == 1


def test_replace_entry_rewrites_nested_entry_in_place(package_builder: PackageBuilder) -> None:
    package = package_builder.write("nested.zip", None, extra={"Other/solution.xml": "old"})
    before = package_builder.entries(package)
    accessor = ArchiveEntryAccessor()

    accessor.replace_entry(package, "solution.xml", b"new")

    assert package_builder.entries(package) == before
    assert package_builder.read(package, "Other/solution.xml") == b"new"
    assert accessor.extract_entry(package, "solution.xml") == b"new"


def test_replace_entry_inserts_when_missing(package_builder: PackageBuilder) -> None:
    package = package_builder.write("empty.zip", None)

    ArchiveEntryAccessor().replace_entry(package, "solution.xml", b"<fresh />")

    assert package_builder.read(package) == b"<fresh />"


def test_replace_entry_leaves_corrupt_archive_untouched(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.zip"
    bogus.write_bytes(b"not a zip")

    with pytest.raises(CorruptArchiveError):
        ArchiveEntryAccessor().replace_entry(bogus, "solution.xml", b"x")
    assert bogus.read_bytes() == b"not a zip"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["bogus.zip"]


def test_replace_entry_wraps_temporary_file_failure(
    package_builder: PackageBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    package = package_builder.write("core.zip", "old")
    original = package.read_bytes()

    def failing_mkstemp(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(tempfile, "mkstemp", failing_mkstemp)

    with pytest.raises(MutationError) as excinfo:
        ArchiveEntryAccessor().replace_entry(package, "solution.xml", b"new")
    assert "Permission denied" in excinfo.value.detail
    assert package.read_bytes() == original


def test_replace_entry_missing_archive(tmp_path: Path) -> None:
    with pytest.raises(ArchiveNotFoundError):
        ArchiveEntryAccessor().replace_entry(tmp_path / "missing.zip", "solution.xml", b"x")
