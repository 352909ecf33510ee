"""OCR collaborator: recognizes text in picture bytes via Tesseract."""
from __future__ import annotations

import io
from contextlib import contextmanager
from typing import Iterator, Protocol

import pytesseract
from PIL import Image

from pptx_renderer.errors import RecognitionError
from pptx_renderer.model.elements import OcrResult
from pptx_renderer.utils.logger import get_logger
from pptx_renderer.utils.text_normalizer import TextNormalizer

LOGGER = get_logger(__name__)


class Recognizer(Protocol):
    """Anything that turns raw image bytes into text or raises RecognitionError."""

    def recognize(self, data: bytes) -> OcrResult:
        ...


@contextmanager
def recognition_context(data: bytes) -> Iterator[Image.Image]:
    """Open a fresh image for one recognition call and always release it."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise RecognitionError(f"unreadable image ({exc})") from exc
    prepared = image
    try:
        if image.mode not in ("RGB", "L"):
            try:
                prepared = image.convert("RGB")
            except (OSError, ValueError) as exc:
                raise RecognitionError(f"cannot convert image ({exc})") from exc
        yield prepared
    finally:
        if prepared is not image:
            prepared.close()
        image.close()


class TesseractRecognizer:
    """Runs ``pytesseract.image_to_string`` with a per-call timeout."""

    def __init__(self, lang: str = "eng", timeout: float = 30.0, config: str = "--psm 3") -> None:
        self.lang = lang
        self.timeout = timeout
        self.config = config
        self._normalizer = TextNormalizer()

    def recognize(self, data: bytes) -> OcrResult:
        with recognition_context(data) as image:
            try:
                raw = pytesseract.image_to_string(
                    image,
                    lang=self.lang,
                    config=self.config,
                    timeout=self.timeout,
                )
            except pytesseract.TesseractNotFoundError as exc:
                raise RecognitionError("tesseract binary not available") from exc
            except pytesseract.TesseractError as exc:
                raise RecognitionError(f"tesseract failed: {exc.message}") from exc
            except RuntimeError as exc:
                # pytesseract kills the process and raises a bare RuntimeError on timeout
                if "timeout" in str(exc).lower():
                    raise RecognitionError(f"recognition timed out after {self.timeout}s") from exc
                raise RecognitionError(f"tesseract run failed: {exc}") from exc
            except OSError as exc:
                raise RecognitionError(f"tesseract could not run: {exc}") from exc
        text = self._normalizer.normalize_text(raw)
        LOGGER.debug("Recognized %d characters", len(text))
        return OcrResult(text=text)
