"""Utilities for reading Open Packaging Convention relationship parts."""
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, Iterable, Mapping, Optional, Tuple
from xml.etree import ElementTree as ET

from pptx_renderer.errors import InvalidPartError
from pptx_renderer.utils.logger import get_logger
from pptx_renderer.utils.xml_utils import parse_xml

LOGGER = get_logger(__name__)

OFFICE_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

RELTYPE_SLIDE_LAYOUT = f"{OFFICE_REL_NS}/slideLayout"
RELTYPE_IMAGE = f"{OFFICE_REL_NS}/image"
RELTYPE_HYPERLINK = f"{OFFICE_REL_NS}/hyperlink"

PACKAGE_RELS_PART = "_rels/.rels"


@dataclass(frozen=True)
class Relationship:
    """Represents a single OPC relationship."""

    source_part: str
    r_id: str
    target: str
    rel_type: str
    is_external: bool = False
    resolved_target: Optional[str] = None


class Relationships:
    """Relationship tables for every part of the package, keyed by owning part."""

    def __init__(self, relationships: Dict[str, Dict[str, Relationship]]) -> None:
        self._by_source = relationships

    @classmethod
    def from_package(cls, parts: Mapping[str, bytes]) -> "Relationships":
        """Collect relationships from all ``.rels`` parts within the package."""
        by_source: Dict[str, Dict[str, Relationship]] = {}
        for name in sorted(parts):
            if not name.endswith(".rels"):
                continue
            source, base_dir = cls._source_and_base_from_rel_part(name)
            try:
                tree = parse_xml(parts[name], name)
            except InvalidPartError as exc:
                LOGGER.warning("Skipping unreadable relationship part: %s", exc)
                continue
            parsed = cls._parse_relationship_part(source, base_dir, tree)
            if parsed:
                by_source[source] = parsed
        LOGGER.debug("Indexed relationships for %d parts", len(by_source))
        return cls(by_source)

    def resolve(self, part_name: str, r_id: str) -> Optional[Relationship]:
        """Return the relationship ``r_id`` owned by ``part_name``, or ``None``."""
        source = self._normalize_source(part_name)
        return self._by_source.get(source, {}).get(r_id)

    find = resolve

    def for_source(self, part_name: str) -> Dict[str, Relationship]:
        """Return all relationships for a given source part."""
        source = self._normalize_source(part_name)
        return dict(self._by_source.get(source, {}))

    def iter_all(self) -> Iterable[Relationship]:
        """Iterate over all registered relationships."""
        for rels in self._by_source.values():
            yield from rels.values()

    def targets_by_type(self, part_name: str, rel_type: str) -> Dict[str, str]:
        """Map relationship ids of ``part_name`` with the given type to their targets."""
        result = {}
        for r_id, rel in self.for_source(part_name).items():
            if rel.rel_type == rel_type:
                result[r_id] = rel.resolved_target or rel.target
        return result

    def __len__(self) -> int:
        return len(self._by_source)

    @classmethod
    def _parse_relationship_part(
        cls, source_part: str, base_dir: PurePosixPath, tree: ET.Element
    ) -> Dict[str, Relationship]:
        result: Dict[str, Relationship] = {}
        for rel_el in tree.iter("Relationship"):
            r_id = rel_el.attrib.get("Id")
            if not r_id:
                LOGGER.debug("Relationship without Id in %s", source_part or PACKAGE_RELS_PART)
                continue
            if r_id in result:
                LOGGER.warning("Duplicate relationship id %s in %s; keeping the first", r_id, source_part)
                continue
            target = rel_el.attrib.get("Target", "")
            is_external = rel_el.attrib.get("TargetMode") == "External"
            result[r_id] = Relationship(
                source_part=source_part,
                r_id=r_id,
                target=target,
                rel_type=rel_el.attrib.get("Type", ""),
                is_external=is_external,
                resolved_target=cls._resolve_target_path(base_dir, target, is_external),
            )
        return result

    @staticmethod
    def _source_and_base_from_rel_part(rel_part: str) -> Tuple[str, PurePosixPath]:
        """Map ``dir/_rels/name.rels`` to its owning part ``dir/name`` and base ``dir``."""
        if rel_part == PACKAGE_RELS_PART:
            return "", PurePosixPath("")
        if "/_rels/" in rel_part:
            folder, suffix = rel_part.split("/_rels/", 1)
            return f"{folder}/{suffix[:-5]}", PurePosixPath(folder)
        if rel_part.startswith("_rels/"):
            return rel_part[len("_rels/") : -5], PurePosixPath("")
        return rel_part[:-5], PurePosixPath(rel_part).parent

    @staticmethod
    def _resolve_target_path(base_dir: PurePosixPath, target: str, is_external: bool) -> Optional[str]:
        if not target:
            return None
        if is_external:
            return target
        if target.startswith("/"):
            return posixpath.normpath(target.lstrip("/"))
        return posixpath.normpath(base_dir.joinpath(target).as_posix())

    @classmethod
    def _normalize_source(cls, part_name: str) -> str:
        if part_name.endswith(".rels"):
            source, _ = cls._source_and_base_from_rel_part(part_name)
            return source
        return part_name.lstrip("/")
