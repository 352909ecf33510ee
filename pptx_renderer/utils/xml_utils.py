"""Namespace-agnostic XML parsing for presentation parts."""
from __future__ import annotations

from typing import Optional
from xml.etree import ElementTree as ET

from pptx_renderer.errors import InvalidPartError


def local_name(name: str) -> str:
    """Strip a ``{uri}`` or ``prefix:`` qualifier from a tag or attribute name."""
    if "}" in name:
        name = name.split("}", 1)[1]
    if ":" in name:
        name = name.split(":", 1)[1]
    return name


def strip_namespaces(element: ET.Element) -> ET.Element:
    """Rewrite tag and attribute names of ``element`` and its descendants in place."""
    for node in element.iter():
        if not isinstance(node.tag, str):
            continue
        node.tag = local_name(node.tag)
        if node.attrib:
            stripped = {local_name(key): value for key, value in node.attrib.items()}
            node.attrib.clear()
            node.attrib.update(stripped)
    return element


def parse_xml(data: bytes | str, part_name: Optional[str] = None) -> ET.Element:
    """Parse markup into a tree whose tag and attribute names carry no namespace.

    Elements that share a local name are indistinguishable afterwards, whatever
    prefix or namespace they were declared with.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise InvalidPartError(f"malformed XML ({exc})", part_name) from exc
    return strip_namespaces(root)


def find_path(element: ET.Element, *names: str) -> Optional[ET.Element]:
    """Follow a chain of direct children, returning ``None`` on the first miss."""
    current: Optional[ET.Element] = element
    for name in names:
        if current is None:
            return None
        current = current.find(name)
    return current


def int_attr(element: Optional[ET.Element], name: str) -> Optional[int]:
    if element is None:
        return None
    value = element.attrib.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def bool_attr(element: Optional[ET.Element], name: str) -> bool:
    """Read an OOXML boolean attribute (``1``/``true``/``on``)."""
    if element is None:
        return False
    return element.attrib.get(name, "").lower() in {"1", "true", "on"}
