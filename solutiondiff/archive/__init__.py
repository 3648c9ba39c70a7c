"""Zip archive access for solution packages."""

from .accessor import ArchiveEntryAccessor

__all__ = ["ArchiveEntryAccessor"]
