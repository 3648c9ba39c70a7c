"""Permissive text-scan parsing of solution descriptors.

The descriptor is treated as flat text rather than a validated XML tree: every
field is optional and falls back to a default, and attribute order does not
matter. ``DescriptorParser`` is the only thing the comparison pipeline talks to,
so a stricter parser can take its place without touching diffing code.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from ..config import DEFAULT_COMPONENT_ELEMENT, DEFAULT_ENTRY_NAME
from ..logging import get_logger
from ..models import ComponentRecord, SolutionInfo

DEFAULT_VERSION = "1.0"
GENERATED_BY_MARKER = "generatedBy="

_VERSION_PATTERN = re.compile(r"<Version>([^<]+)</Version>")
_UNIQUE_NAME_PATTERN = re.compile(r"<UniqueName>([^<]+)</UniqueName>")
_PUBLISHER_BLOCK_PATTERN = re.compile(r"<Publisher\b(?![^>]*/>)[^>]*>(.*?)(?:</Publisher>|\Z)", re.DOTALL)
_GENERATED_BY_ATTRIBUTE = re.compile(r'\s*generatedBy="[^"]*"')

_SCHEMA_NAME_ATTR = re.compile(r'\bschemaName="([^"]+)"')
_ID_ATTR = re.compile(r'\bid="\{?([^}"]+)\}?"')
_TYPE_ATTR = re.compile(r'\btype="([^"]+)"')

_ENCODING = "utf-8"
# Undecodable bytes survive a decode/encode round trip unchanged.
_ERRORS = "surrogateescape"


def decode_descriptor(data: bytes) -> str:
    return data.decode(_ENCODING, errors=_ERRORS)


def encode_descriptor(text: str) -> bytes:
    return text.encode(_ENCODING, errors=_ERRORS)


class DescriptorParser:
    """Extracts metadata and declared components from descriptor text."""

    def __init__(self, component_element: str = DEFAULT_COMPONENT_ELEMENT) -> None:
        self.component_element = component_element
        self._component_pattern = re.compile(
            rf"<{re.escape(component_element)}\s+([^>]*?)/>"
        )
        self.logger = get_logger("parsing")

    def parse(
        self,
        text: str,
        *,
        archive_path: Path | str = "",
        entry_name: str = DEFAULT_ENTRY_NAME,
    ) -> SolutionInfo:
        version = _first_group(_VERSION_PATTERN, text)
        if version is None:
            self.logger.debug("No <Version> element found; assuming %s", DEFAULT_VERSION)
        return SolutionInfo(
            archive_path=Path(archive_path),
            entry_name=entry_name,
            version=version or DEFAULT_VERSION,
            unique_name=_first_group(_UNIQUE_NAME_PATTERN, text) or "",
            publisher_unique_name=self.publisher_unique_name(text),
            has_generated_by=GENERATED_BY_MARKER in text,
            raw_xml=text,
        )

    @staticmethod
    def publisher_unique_name(text: str) -> str:
        """Return the ``<UniqueName>`` nested in the first ``<Publisher>`` block.

        The block ends at ``</Publisher>`` so a unique name declared after the
        publisher is never mistaken for the publisher's. A self-closing
        ``<Publisher />`` opens no block.
        """
        block = _PUBLISHER_BLOCK_PATTERN.search(text)
        if block is None:
            return ""
        return _first_group(_UNIQUE_NAME_PATTERN, block.group(1)) or ""

    def extract_components(self, text: str) -> List[ComponentRecord]:
        components: List[ComponentRecord] = []
        for match in self._component_pattern.finditer(text):
            attrs = match.group(1)
            name = _first_group(_SCHEMA_NAME_ATTR, attrs) or _first_group(_ID_ATTR, attrs)
            if not name:
                continue
            components.append(
                ComponentRecord(name=name, type=_first_group(_TYPE_ATTR, attrs) or "unknown")
            )
        self.logger.debug("Found %d %s elements", len(components), self.component_element)
        return components


def rewrite_descriptor(
    text: str,
    *,
    new_version: Optional[str] = None,
    remove_generated_by: bool = False,
) -> str:
    """Apply version and provenance substitutions, leaving other text intact."""
    updated = text
    if new_version:
        updated = _VERSION_PATTERN.sub(
            lambda _: f"<Version>{new_version}</Version>", updated, count=1
        )
    if remove_generated_by:
        updated = _GENERATED_BY_ATTRIBUTE.sub("", updated)
    return updated


def _first_group(pattern: re.Pattern[str], text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


__all__ = [
    "DEFAULT_VERSION",
    "DescriptorParser",
    "decode_descriptor",
    "encode_descriptor",
    "rewrite_descriptor",
]
