"""Project slide parts into the typed shape tree."""
from __future__ import annotations

from typing import List, Optional, Tuple
from xml.etree import ElementTree as ET

from pptx_renderer.errors import InvalidPartError
from pptx_renderer.model.elements import (
    GroupShape,
    Paragraph,
    PictureShape,
    ShapeNode,
    SlideDocument,
    TextRun,
    TextShape,
)
from pptx_renderer.parser.pptx_loader import PptxPackage
from pptx_renderer.utils.logger import get_logger
from pptx_renderer.utils.xml_utils import bool_attr, find_path, int_attr

LOGGER = get_logger(__name__)

# Non-visual and property children of spTree/grpSp that carry no drawable content.
_STRUCTURAL_TAGS = {"nvGrpSpPr", "grpSpPr", "extLst"}


class SlideParser:
    """Transforms a slide's generic tree into a :class:`SlideDocument`."""

    def __init__(self, package: PptxPackage) -> None:
        self._package = package

    def parse(self, part_name: str, index: int) -> SlideDocument:
        """Validate and project one slide part.

        Raises :class:`InvalidPartError` when the markup is malformed or the
        ``sld/cSld/spTree`` path is incomplete.
        """
        root = self._package.require_xml_part(part_name)
        if root.tag != "sld":
            raise InvalidPartError(f"unexpected root element <{root.tag}>", part_name)
        common = root.find("cSld")
        if common is None:
            raise InvalidPartError("missing cSld element", part_name)
        tree = common.find("spTree")
        if tree is None:
            raise InvalidPartError("missing spTree element", part_name)

        shapes = self._parse_children(tree, part_name)
        return SlideDocument(part_name=part_name, index=index, shapes=shapes)

    def _parse_children(self, container: ET.Element, part_name: str) -> Tuple[ShapeNode, ...]:
        shapes: List[ShapeNode] = []
        for element in container:
            tag = element.tag
            if tag == "sp":
                shape = self._parse_text_shape(element)
                if shape is not None:
                    shapes.append(shape)
            elif tag == "pic":
                shapes.append(self._parse_picture(element))
            elif tag == "grpSp":
                shapes.append(self._parse_group(element, part_name))
            elif tag in _STRUCTURAL_TAGS:
                continue
            else:
                LOGGER.debug("Skipping unsupported element <%s> in %s", tag, part_name)
        return tuple(shapes)

    def _parse_text_shape(self, sp_el: ET.Element) -> Optional[TextShape]:
        shape_id, name = self._non_visual(sp_el, "nvSpPr")
        body = sp_el.find("txBody")
        if body is None:
            return None
        paragraphs = tuple(self._parse_paragraph(p_el) for p_el in body.findall("p"))
        return TextShape(shape_id=shape_id, name=name, paragraphs=paragraphs)

    def _parse_paragraph(self, p_el: ET.Element) -> Paragraph:
        runs: List[TextRun] = []
        for child in p_el:
            if child.tag in ("r", "fld"):
                runs.append(self._parse_run(child))
            elif child.tag == "br":
                runs.append(TextRun(text="", line_break=True))
        return Paragraph(runs=tuple(runs))

    def _parse_run(self, run_el: ET.Element) -> TextRun:
        text_el = run_el.find("t")
        text = text_el.text if text_el is not None and text_el.text else ""
        props = run_el.find("rPr")
        underline = props is not None and props.attrib.get("u", "none") != "none"
        return TextRun(
            text=text,
            bold=bool_attr(props, "b"),
            italic=bool_attr(props, "i"),
            underline=underline,
        )

    def _parse_picture(self, pic_el: ET.Element) -> PictureShape:
        shape_id, name = self._non_visual(pic_el, "nvPicPr")
        c_nv_pr = find_path(pic_el, "nvPicPr", "cNvPr")
        description = c_nv_pr.attrib.get("descr", "") if c_nv_pr is not None else ""
        blip = find_path(pic_el, "blipFill", "blip")
        embed = blip.attrib.get("embed") if blip is not None else None
        return PictureShape(shape_id=shape_id, name=name, embed_rel_id=embed or None, description=description)

    def _parse_group(self, group_el: ET.Element, part_name: str) -> GroupShape:
        shape_id, name = self._non_visual(group_el, "nvGrpSpPr")
        return GroupShape(shape_id=shape_id, name=name, children=self._parse_children(group_el, part_name))

    @staticmethod
    def _non_visual(element: ET.Element, container: str) -> Tuple[Optional[int], str]:
        c_nv_pr = find_path(element, container, "cNvPr")
        if c_nv_pr is None:
            return None, ""
        return int_attr(c_nv_pr, "id"), c_nv_pr.attrib.get("name", "")


def parse_slides(package: PptxPackage) -> Tuple[SlideDocument, ...]:
    """Parse every slide in numeric order, isolating per-slide failures."""
    parser = SlideParser(package)
    slides: List[SlideDocument] = []
    for index, part_name in enumerate(package.slide_parts, start=1):
        try:
            slides.append(parser.parse(part_name, index))
        except InvalidPartError as exc:
            LOGGER.warning("Rendering slide %d as empty: %s", index, exc)
            slides.append(SlideDocument(part_name=part_name, index=index))
    LOGGER.info("Parsed %d slides", len(slides))
    return tuple(slides)
