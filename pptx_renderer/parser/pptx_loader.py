"""PPTX package loader: unpacks the archive and validates its required parts."""
from __future__ import annotations

import io
import re
import zipfile
import zlib
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple
from xml.etree import ElementTree as ET

from pptx_renderer.errors import InvalidContainerError, InvalidPartError
from pptx_renderer.parser.rels_parser import PACKAGE_RELS_PART, Relationships
from pptx_renderer.utils.logger import get_logger
from pptx_renderer.utils.xml_utils import parse_xml

LOGGER = get_logger(__name__)

PRESENTATION_XML_PATH = "ppt/presentation.xml"
MEDIA_PREFIX = "ppt/media/"

SLIDE_PART_PATTERN = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
LAYOUT_PART_PATTERN = re.compile(r"^ppt/slideLayouts/slideLayout(\d+)\.xml$")
MASTER_PART_PATTERN = re.compile(r"^ppt/slideMasters/slideMaster(\d+)\.xml$")


def _numbered_parts(names: List[str], pattern: re.Pattern) -> Tuple[str, ...]:
    """Return the names matching ``pattern`` ordered by their embedded number."""
    numbered = []
    for name in names:
        match = pattern.match(name)
        if match:
            numbered.append((int(match.group(1)), name))
    return tuple(name for _, name in sorted(numbered))


@dataclass(slots=True)
class PptxPackage:
    """Read-only view over the entries of a PPTX archive."""

    raw_parts: Mapping[str, bytes]
    xml_cache: Dict[str, ET.Element] = field(default_factory=dict)
    slide_parts: Tuple[str, ...] = ()

    @classmethod
    def load(cls, data: bytes) -> "PptxPackage":
        """Open a PPTX archive held in memory and validate its structure."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"PPTX input must be bytes, got {type(data).__name__}")
        try:
            with zipfile.ZipFile(io.BytesIO(bytes(data))) as pptx_zip:
                parts = {}
                for info in pptx_zip.infolist():
                    if info.is_dir():
                        continue
                    try:
                        parts[info.filename] = pptx_zip.read(info)
                    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as exc:
                        raise InvalidContainerError(
                            f"Invalid PPTX file: cannot read entry {info.filename} ({exc})"
                        ) from exc
        except zipfile.BadZipFile as exc:
            raise InvalidContainerError(f"Invalid PPTX file: not a zip archive ({exc})") from exc

        LOGGER.debug("Loaded %d parts from %d input bytes", len(parts), len(data))
        return cls.from_parts(parts)

    @classmethod
    def from_parts(cls, parts: Mapping[str, bytes]) -> "PptxPackage":
        """Build a package from already extracted entries."""
        package = cls(raw_parts=MappingProxyType(dict(parts)))
        package._validate()
        return package

    # ------------------------------------------------------------------
    # Public helpers
    def get_part_data(self, name: str) -> Optional[bytes]:
        return self.raw_parts.get(name)

    def get_xml_part(self, name: str) -> Optional[ET.Element]:
        """Parse ``name`` on first access and cache the namespace-stripped tree."""
        if name in self.xml_cache:
            return self.xml_cache[name]
        data = self.raw_parts.get(name)
        if data is None:
            return None
        tree = parse_xml(data, name)
        self.xml_cache[name] = tree
        return tree

    def require_xml_part(self, name: str) -> ET.Element:
        tree = self.get_xml_part(name)
        if tree is None:
            raise InvalidPartError("required part missing from package", name)
        return tree

    def layout_parts(self) -> Tuple[str, ...]:
        return _numbered_parts(list(self.raw_parts), LAYOUT_PART_PATTERN)

    def master_parts(self) -> Tuple[str, ...]:
        return _numbered_parts(list(self.raw_parts), MASTER_PART_PATTERN)

    def media_parts(self) -> Tuple[str, ...]:
        return tuple(sorted(name for name in self.raw_parts if name.startswith(MEDIA_PREFIX)))

    def relationships(self) -> Relationships:
        return Relationships.from_package(self.raw_parts)

    # ------------------------------------------------------------------
    # Internal bootstrap
    def _validate(self) -> None:
        for required in (PACKAGE_RELS_PART, PRESENTATION_XML_PATH):
            if required not in self.raw_parts:
                raise InvalidContainerError(f"Invalid PPTX file: missing {required}")

        self.slide_parts = _numbered_parts(list(self.raw_parts), SLIDE_PART_PATTERN)
        if not self.slide_parts:
            raise InvalidContainerError("Invalid PPTX file: no slides found")
        LOGGER.debug("Found %d slide parts", len(self.slide_parts))
