"""Parse the presentation part and the generic layout/master trees."""
from __future__ import annotations

from typing import Dict, Iterable
from xml.etree import ElementTree as ET

from pptx_renderer.errors import InvalidPartError
from pptx_renderer.model.presentation_model import (
    DEFAULT_SLIDE_HEIGHT_EMU,
    DEFAULT_SLIDE_WIDTH_EMU,
    PresentationInfo,
)
from pptx_renderer.parser.pptx_loader import PRESENTATION_XML_PATH, PptxPackage
from pptx_renderer.utils.logger import get_logger
from pptx_renderer.utils.xml_utils import int_attr

LOGGER = get_logger(__name__)


def parse_presentation(package: PptxPackage) -> PresentationInfo:
    """Read slide size and slide count; any failure here is fatal."""
    root = package.require_xml_part(PRESENTATION_XML_PATH)
    if root.tag != "presentation":
        raise InvalidPartError(f"unexpected root element <{root.tag}>", PRESENTATION_XML_PATH)

    size = root.find("sldSz")
    width = int_attr(size, "cx")
    height = int_attr(size, "cy")
    if width is None or height is None or width <= 0 or height <= 0:
        LOGGER.debug("No usable sldSz in %s; assuming 16:9", PRESENTATION_XML_PATH)
        width, height = DEFAULT_SLIDE_WIDTH_EMU, DEFAULT_SLIDE_HEIGHT_EMU

    id_list = root.find("sldIdLst")
    slide_count = len(id_list.findall("sldId")) if id_list is not None else None
    if slide_count is not None and slide_count != len(package.slide_parts):
        LOGGER.warning(
            "Presentation lists %d slides but the package holds %d slide parts",
            slide_count,
            len(package.slide_parts),
        )
    return PresentationInfo(slide_width_emu=width, slide_height_emu=height, slide_count=slide_count)


def parse_generic_parts(package: PptxPackage, names: Iterable[str]) -> Dict[str, ET.Element]:
    """Parse layout or master parts into generic trees, skipping unreadable ones.

    These trees are kept for placeholder inheritance and are not projected
    into shapes.
    """
    parsed: Dict[str, ET.Element] = {}
    for name in names:
        try:
            tree = package.get_xml_part(name)
        except InvalidPartError as exc:
            LOGGER.warning("Skipping unreadable part: %s", exc)
            continue
        if tree is not None:
            parsed[name] = tree
    return parsed
