"""Typed shape tree and asset records produced by the parsers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class TextRun:
    """A contiguous run of text sharing one set of character properties."""

    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    line_break: bool = False


@dataclass(frozen=True, slots=True)
class Paragraph:
    runs: Tuple[TextRun, ...] = ()

    @property
    def text(self) -> str:
        return "".join("\n" if run.line_break else run.text for run in self.runs)


@dataclass(frozen=True, slots=True)
class TextShape:
    """A ``p:sp`` shape carrying a text body."""

    shape_id: Optional[int]
    name: str
    paragraphs: Tuple[Paragraph, ...] = ()


@dataclass(frozen=True, slots=True)
class PictureShape:
    """A ``p:pic`` shape referencing its image through a relationship id."""

    shape_id: Optional[int]
    name: str
    embed_rel_id: Optional[str] = None
    description: str = ""


@dataclass(frozen=True, slots=True)
class GroupShape:
    """A ``p:grpSp`` container; children keep document order."""

    shape_id: Optional[int]
    name: str
    children: Tuple["ShapeNode", ...] = ()


ShapeNode = Union[TextShape, PictureShape, GroupShape]


@dataclass(frozen=True, slots=True)
class SlideDocument:
    """Ordered shape tree for one slide part."""

    part_name: str
    index: int
    shapes: Tuple[ShapeNode, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.shapes


@dataclass(frozen=True, slots=True)
class ImageMetadata:
    """Pixel metadata reported by an image prober."""

    format: Optional[str]
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True, slots=True)
class MediaAsset:
    """One entry under ``ppt/media/`` with its probed metadata."""

    path: str
    data: bytes = field(repr=False)
    format: Optional[str]
    media_type: str
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return self.media_type.startswith("image/")


@dataclass(frozen=True, slots=True)
class OcrResult:
    """Text recognized from a single picture."""

    text: str
