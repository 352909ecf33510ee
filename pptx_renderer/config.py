"""Options controlling a single PPTX → HTML conversion."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PictureMode(str, Enum):
    """What a picture shape contributes to the output."""

    TEXT = "text"
    IMAGE = "image"
    BOTH = "both"

    @property
    def wants_text(self) -> bool:
        return self in (PictureMode.TEXT, PictureMode.BOTH)

    @property
    def wants_image(self) -> bool:
        return self in (PictureMode.IMAGE, PictureMode.BOTH)


@dataclass(frozen=True)
class ConversionOptions:
    """Caller-facing configuration for :meth:`PptxConverter.to_html`."""

    include_styles: bool = True
    picture_mode: PictureMode = PictureMode.TEXT
    ocr_lang: str = "eng"
    ocr_timeout: float = 30.0
    max_workers: int = 4
    title: str = "PowerPoint Presentation"

    def __post_init__(self) -> None:
        # Accept plain strings such as "image" from CLI or callers.
        object.__setattr__(self, "picture_mode", PictureMode(self.picture_mode))
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.ocr_timeout <= 0:
            raise ValueError(f"ocr_timeout must be positive, got {self.ocr_timeout}")
