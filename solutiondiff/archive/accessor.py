"""Single-entry access to solution zip archives."""

from __future__ import annotations

import os
import secrets
import shutil
import tempfile
import time
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..errors import ArchiveNotFoundError, ArchiveReadError, CorruptArchiveError, MutationError
from ..logging import get_logger


class ArchiveEntryAccessor:
    """Reads and replaces individual named entries inside a zip archive.

    An entry matches when its full name or its last path segment equals the
    requested name, so ``Other/solution.xml`` answers to ``solution.xml``.
    The first match in archive order wins.
    """

    SCRATCH_PREFIX = ".solutiondiff_extract_"

    def __init__(self, scratch_root: Path | None = None) -> None:
        self.scratch_root = scratch_root
        self.logger = get_logger("archive")

    def extract_entry(self, archive_path: Path | str, entry_name: str) -> Optional[bytes]:
        """Return the inflated bytes of ``entry_name`` or ``None`` when absent.

        The entry goes through a per-call scratch directory which is removed
        before returning, whatever the outcome.
        """
        archive = Path(archive_path)
        if not archive.is_file():
            raise ArchiveNotFoundError(archive)

        try:
            with self._scratch_dir() as scratch:
                try:
                    with zipfile.ZipFile(archive) as bundle:
                        info = _find_entry(bundle, entry_name)
                        if info is None:
                            self.logger.debug("No %s entry in %s", entry_name, archive.name)
                            return None
                        target = scratch / "entry.bin"
                        with bundle.open(info) as source, target.open("wb") as sink:
                            shutil.copyfileobj(source, sink)
                except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, NotImplementedError, RuntimeError) as exc:
                    raise CorruptArchiveError(archive, detail=str(exc)) from exc
                data = target.read_bytes()
        except OSError as exc:
            raise ArchiveReadError(archive, detail=str(exc)) from exc
        self.logger.debug("Read %d bytes from %s!%s", len(data), archive.name, info.filename)
        return data

    def replace_entry(self, archive_path: Path | str, entry_name: str, data: bytes) -> None:
        """Swap the content of the entry ``extract_entry`` would read.

        The replacement keeps the matched entry's name and position; later
        entries with that same name are dropped. When nothing matches,
        ``entry_name`` is appended. The archive is rebuilt into a sibling
        temporary file and swapped in atomically, so a failed rewrite leaves
        the original untouched.
        """
        archive = Path(archive_path)
        if not archive.is_file():
            raise ArchiveNotFoundError(archive)

        tmp_path: Optional[Path] = None
        replaced: Optional[str] = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{archive.name}.", suffix=".tmp", dir=str(archive.parent)
            )
            os.close(fd)
            tmp_path = Path(tmp_name)
            with zipfile.ZipFile(archive) as source, zipfile.ZipFile(
                tmp_path, "w", compression=zipfile.ZIP_DEFLATED
            ) as target:
                for info in source.infolist():
                    if replaced is None and _matches(info.filename, entry_name):
                        replaced = info.filename
                        target.writestr(replaced, data, compress_type=zipfile.ZIP_DEFLATED)
                        continue
                    if info.filename == replaced:
                        continue
                    target.writestr(info, source.read(info))
                if replaced is None:
                    target.writestr(entry_name, data, compress_type=zipfile.ZIP_DEFLATED)
            shutil.copymode(archive, tmp_path)
            os.replace(tmp_path, archive)
        except zipfile.BadZipFile as exc:
            self._discard(tmp_path)
            raise CorruptArchiveError(archive, detail=str(exc)) from exc
        except (OSError, zipfile.LargeZipFile, zlib.error, RuntimeError) as exc:
            self._discard(tmp_path)
            raise MutationError(archive, str(exc)) from exc
        self.logger.info(
            "%s %s in %s (%d bytes)",
            "Replaced" if replaced else "Inserted",
            replaced or entry_name,
            archive.name,
            len(data),
        )

    # ------------------------------------------------------------------
    # Internals

    @contextmanager
    def _scratch_dir(self) -> Iterator[Path]:
        parent = self.scratch_root or Path(tempfile.gettempdir())
        name = f"{self.SCRATCH_PREFIX}{int(time.time() * 1000)}_{secrets.token_hex(4)}"
        scratch = parent / name
        scratch.mkdir(parents=True)
        try:
            yield scratch
        finally:
            try:
                shutil.rmtree(scratch)
            except OSError as exc:
                self.logger.debug("Unable to remove scratch directory %s: %s", scratch, exc)

    def _discard(self, path: Optional[Path]) -> None:
        if path is None:
            return
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            self.logger.debug("Unable to remove temporary archive %s: %s", path, exc)


def _matches(filename: str, entry_name: str) -> bool:
    return filename == entry_name or filename.rsplit("/", 1)[-1] == entry_name


def _find_entry(bundle: zipfile.ZipFile, entry_name: str) -> Optional[zipfile.ZipInfo]:
    for info in bundle.infolist():
        if _matches(info.filename, entry_name):
            return info
    return None


__all__ = ["ArchiveEntryAccessor"]
