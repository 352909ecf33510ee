"""Render slide shape trees into HTML fragments."""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from pptx_renderer.config import ConversionOptions
from pptx_renderer.errors import RecognitionError
from pptx_renderer.model.elements import (
    GroupShape,
    MediaAsset,
    OcrResult,
    Paragraph,
    PictureShape,
    ShapeNode,
    SlideDocument,
    TextShape,
)
from pptx_renderer.ocr.recognizer import Recognizer
from pptx_renderer.parser.media_extractor import MediaCatalog
from pptx_renderer.parser.rels_parser import Relationships
from pptx_renderer.renderer.utils import css_declarations, data_uri, escape_attr, escape_text, run_to_css
from pptx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

# Position of a shape inside its slide: indexes from the spTree down through groups.
ShapePath = Tuple[int, ...]
WorkKey = Tuple[int, ShapePath]

EMPTY_PICTURE = '<div class="picture"></div>'


@dataclass(frozen=True)
class PictureWork:
    """A resolved picture awaiting recognition."""

    key: WorkKey
    asset: MediaAsset


def iter_shapes(shapes: Sequence[ShapeNode], prefix: ShapePath = ()) -> Iterator[Tuple[ShapePath, ShapeNode]]:
    """Depth-first walk yielding every node with its path, in document order."""
    for position, shape in enumerate(shapes):
        path = prefix + (position,)
        yield path, shape
        if isinstance(shape, GroupShape):
            yield from iter_shapes(shape.children, path)


class SlideRenderer:
    """Produces one HTML fragment per slide.

    Picture recognition runs first, on a bounded pool, with results stored by
    ``(slide index, shape path)``; fragments are then built in document order
    so concurrency never changes the output.
    """

    def __init__(
        self,
        relationships: Relationships,
        media: MediaCatalog,
        recognizer: Optional[Recognizer],
        options: ConversionOptions,
    ) -> None:
        self._relationships = relationships
        self._media = media
        self._recognizer = recognizer
        self._options = options

    def render_all(self, slides: Sequence[SlideDocument]) -> List[str]:
        work = self._collect_work(slides)
        texts = self._recognize_all(work) if self._options.picture_mode.wants_text else {}
        assets = {item.key: item.asset for item in work}
        return [self._render_slide(slide, assets, texts) for slide in slides]

    # ------------------------------------------------------------------
    # Picture resolution
    def _collect_work(self, slides: Sequence[SlideDocument]) -> List[PictureWork]:
        work: List[PictureWork] = []
        for slide in slides:
            for path, shape in iter_shapes(slide.shapes):
                if isinstance(shape, PictureShape):
                    asset = self.resolve_picture(slide, shape)
                    if asset is not None:
                        work.append(PictureWork(key=(slide.index, path), asset=asset))
        return work

    def resolve_picture(self, slide: SlideDocument, shape: PictureShape) -> Optional[MediaAsset]:
        """Follow the embed id to a media asset; ``None`` on any soft miss."""
        if not shape.embed_rel_id:
            LOGGER.warning("Picture %r on %s has no embed relationship id", shape.name, slide.part_name)
            return None
        rel = self._relationships.resolve(slide.part_name, shape.embed_rel_id)
        if rel is None:
            LOGGER.warning("No relationship %s for picture on %s", shape.embed_rel_id, slide.part_name)
            return None
        if rel.is_external:
            LOGGER.warning("Picture %s on %s links an external target %s", rel.r_id, slide.part_name, rel.target)
            return None
        asset = self._media.get(rel.resolved_target)
        if asset is None:
            LOGGER.warning("Media %s referenced by %s is missing", rel.resolved_target, slide.part_name)
        return asset

    def _recognize_all(self, work: Sequence[PictureWork]) -> Dict[WorkKey, OcrResult]:
        if not work:
            return {}
        if self._recognizer is None:
            LOGGER.warning("No recognizer configured; %d pictures render without text", len(work))
            return {}

        futures: Dict[WorkKey, Future] = {}
        results: Dict[WorkKey, OcrResult] = {}
        with ThreadPoolExecutor(max_workers=self._options.max_workers, thread_name_prefix="ocr") as pool:
            for item in work:
                futures[item.key] = pool.submit(self._recognizer.recognize, item.asset.data)
            for key, future in futures.items():
                try:
                    results[key] = future.result()
                except RecognitionError as exc:
                    LOGGER.warning("Recognition failed for slide %d shape %s: %s", key[0], key[1], exc)
        LOGGER.info("Recognized text in %d of %d pictures", len(results), len(work))
        return results

    # ------------------------------------------------------------------
    # Fragment construction
    def _render_slide(
        self,
        slide: SlideDocument,
        assets: Dict[WorkKey, MediaAsset],
        texts: Dict[WorkKey, OcrResult],
    ) -> str:
        parts = [f'<div class="slide" data-slide="{slide.index}"><div class="slide-content">']
        for position, shape in enumerate(slide.shapes):
            parts.append(self._render_shape(slide.index, (position,), shape, assets, texts))
        parts.append("</div></div>")
        return "".join(parts)

    def _render_shape(
        self,
        slide_index: int,
        path: ShapePath,
        shape: ShapeNode,
        assets: Dict[WorkKey, MediaAsset],
        texts: Dict[WorkKey, OcrResult],
    ) -> str:
        if isinstance(shape, TextShape):
            return self._render_text_shape(shape)
        if isinstance(shape, PictureShape):
            key = (slide_index, path)
            return self._render_picture(shape, assets.get(key), texts.get(key))
        if isinstance(shape, GroupShape):
            inner = "".join(
                self._render_shape(slide_index, path + (position,), child, assets, texts)
                for position, child in enumerate(shape.children)
            )
            return f'<div class="group">{inner}</div>'
        raise TypeError(f"Unsupported shape node: {type(shape).__name__}")

    def _render_text_shape(self, shape: TextShape) -> str:
        body = "".join(self._render_paragraph(paragraph) for paragraph in shape.paragraphs)
        return f'<div class="shape">{body}</div>'

    def _render_paragraph(self, paragraph: Paragraph) -> str:
        spans = []
        for run in paragraph.runs:
            if run.line_break:
                spans.append("<br/>")
                continue
            style = css_declarations(run_to_css(run))
            style_attr = f' style="{escape_attr(style)}"' if style else ""
            spans.append(f"<span{style_attr}>{escape_text(run.text)}</span>")
        return f"<p>{''.join(spans)}</p>"

    def _render_picture(
        self,
        shape: PictureShape,
        asset: Optional[MediaAsset],
        ocr: Optional[OcrResult],
    ) -> str:
        if asset is None:
            return EMPTY_PICTURE
        mode = self._options.picture_mode
        parts = []
        if mode.wants_image:
            alt = shape.description or shape.name or "Slide Image"
            parts.append(f'<img src="{data_uri(asset)}" alt="{escape_attr(alt)}"/>')
        if mode.wants_text and ocr is not None and ocr.text:
            parts.append(f'<p class="ocr-text">{escape_text(ocr.text)}</p>')
        return f'<div class="picture">{"".join(parts)}</div>'
