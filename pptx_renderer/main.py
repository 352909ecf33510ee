"""Entry-point for the PPTX → HTML pipeline."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pptx_renderer.config import ConversionOptions, PictureMode
from pptx_renderer.model.presentation_model import PresentationModel
from pptx_renderer.ocr.recognizer import Recognizer, TesseractRecognizer
from pptx_renderer.parser.media_extractor import extract_media_from_package
from pptx_renderer.parser.pptx_loader import PptxPackage
from pptx_renderer.parser.presentation_parser import parse_generic_parts, parse_presentation
from pptx_renderer.parser.slide_parser import parse_slides
from pptx_renderer.renderer.html_renderer import HtmlRenderer
from pptx_renderer.renderer.slide_renderer import SlideRenderer
from pptx_renderer.utils.debug import DebugDumper
from pptx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)


def build_presentation_model(data: bytes, max_workers: int = 4) -> PresentationModel:
    """Load a PPTX package, resolve relationships, and parse every stage."""
    package = PptxPackage.load(data)
    relationships = package.relationships()
    info = parse_presentation(package)
    layouts = parse_generic_parts(package, package.layout_parts())
    masters = parse_generic_parts(package, package.master_parts())
    slides = parse_slides(package)
    media = extract_media_from_package(package, max_workers=max_workers)
    return PresentationModel(
        info=info,
        slides=slides,
        relationships=relationships,
        media=media,
        layouts=layouts,
        masters=masters,
    )


def render_html(
    model: PresentationModel,
    options: Optional[ConversionOptions] = None,
    recognizer: Optional[Recognizer] = None,
    output_path: Optional[Path] = None,
) -> str:
    """Render the parsed model into one HTML document string, writing it when a path is given."""
    options = options or ConversionOptions()
    fragments = SlideRenderer(model.relationships, model.media, recognizer, options).render_all(model.slides)
    renderer = HtmlRenderer(options)
    if output_path is None:
        return renderer.build(fragments, model.info)
    return renderer.render(fragments, model.info, output_path)


class PptxConverter:
    """Converts one in-memory PPTX package to HTML.

    The parsed model is built on first use, with the worker bound of the
    options in effect at that time, and is owned by this instance only.
    When no recognizer is given, a :class:`TesseractRecognizer` is created per
    call from the conversion options.
    """

    def __init__(self, data: bytes, recognizer: Optional[Recognizer] = None) -> None:
        self._data = data
        self._recognizer = recognizer
        self._model: Optional[PresentationModel] = None

    @property
    def model(self) -> PresentationModel:
        if self._model is None:
            self._model = build_presentation_model(self._data)
        return self._model

    def to_html(self, options: Optional[ConversionOptions] = None, output_path: Optional[Path] = None) -> str:
        options = options or ConversionOptions()
        if self._model is None:
            self._model = build_presentation_model(self._data, max_workers=options.max_workers)
        recognizer = self._recognizer
        if recognizer is None and options.picture_mode.wants_text:
            recognizer = TesseractRecognizer(lang=options.ocr_lang, timeout=options.ocr_timeout)
        return render_html(self.model, options, recognizer, output_path)


def convert_file(
    pptx_file: str,
    output_file: Optional[str] = None,
    options: Optional[ConversionOptions] = None,
    debug_dir: Optional[str] = None,
) -> Path:
    """Convert a PPTX file on disk and write the HTML beside it by default."""
    pptx_path = Path(pptx_file).resolve()
    if not pptx_path.exists():
        raise FileNotFoundError(f"PPTX file not found: {pptx_path}")

    LOGGER.info("Converting %s", pptx_path.name)
    converter = PptxConverter(pptx_path.read_bytes())
    output_path = Path(output_file).resolve() if output_file else pptx_path.with_suffix(".html")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    converter.to_html(options, output_path)
    LOGGER.info("Wrote %s", output_path)

    if debug_dir:
        DebugDumper(Path(debug_dir)).dump(converter.model)
    return output_path


def main(argv: Optional[list] = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Render PPTX presentations into a single HTML document")
    parser.add_argument("pptx_file", help="Path to the input .pptx file")
    parser.add_argument("--output", help="Path of the HTML file to write")
    parser.add_argument("--no-styles", action="store_true", help="Omit the inline stylesheet")
    parser.add_argument(
        "--picture-mode",
        choices=[mode.value for mode in PictureMode],
        default=PictureMode.TEXT.value,
        help="Emit recognized text, embedded images, or both for pictures",
    )
    parser.add_argument("--ocr-lang", default="eng", help="Tesseract language codes, e.g. eng+deu")
    parser.add_argument("--ocr-timeout", type=float, default=30.0, help="Seconds allowed per recognition call")
    parser.add_argument("--workers", type=int, default=4, help="Size of the media probing and recognition worker pools")
    parser.add_argument("--debug-dir", help="Directory to dump the parsed model as JSON")

    args = parser.parse_args(argv)
    options = ConversionOptions(
        include_styles=not args.no_styles,
        picture_mode=PictureMode(args.picture_mode),
        ocr_lang=args.ocr_lang,
        ocr_timeout=args.ocr_timeout,
        max_workers=args.workers,
    )
    convert_file(args.pptx_file, args.output, options, args.debug_dir)


if __name__ == "__main__":  # pragma: no cover
    main()
