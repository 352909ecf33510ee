"""Aggregate model combining every parsed stage of a presentation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Optional, Tuple
from xml.etree import ElementTree as ET

from pptx_renderer.model.elements import SlideDocument

if TYPE_CHECKING:
    from pptx_renderer.parser.media_extractor import MediaCatalog
    from pptx_renderer.parser.rels_parser import Relationships

# Default ``p:sldSz`` of a 16:9 deck, in EMU.
DEFAULT_SLIDE_WIDTH_EMU = 12192000
DEFAULT_SLIDE_HEIGHT_EMU = 6858000


@dataclass(frozen=True, slots=True)
class PresentationInfo:
    """Facts read from ``ppt/presentation.xml``."""

    slide_width_emu: int = DEFAULT_SLIDE_WIDTH_EMU
    slide_height_emu: int = DEFAULT_SLIDE_HEIGHT_EMU
    slide_count: Optional[int] = None

    @property
    def aspect_percent(self) -> float:
        """Slide height as a percentage of its width."""
        if self.slide_width_emu <= 0:
            return DEFAULT_SLIDE_HEIGHT_EMU / DEFAULT_SLIDE_WIDTH_EMU * 100
        return self.slide_height_emu / self.slide_width_emu * 100


@dataclass(frozen=True, slots=True)
class PresentationModel:
    """Immutable result of the parsing stages that renderers consume."""

    info: PresentationInfo
    slides: Tuple[SlideDocument, ...]
    relationships: "Relationships"
    media: "MediaCatalog"
    layouts: Mapping[str, ET.Element] = field(default_factory=dict)
    masters: Mapping[str, ET.Element] = field(default_factory=dict)
