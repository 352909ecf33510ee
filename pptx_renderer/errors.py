"""Exception hierarchy raised by the pptx renderer pipeline."""
from __future__ import annotations

from typing import Optional


class PptxRendererError(Exception):
    """Base class for every error raised by this library."""


class InvalidContainerError(PptxRendererError, ValueError):
    """The input is not a usable presentation package."""


class InvalidPartError(PptxRendererError, ValueError):
    """A part's markup is malformed or lacks a required structural node."""

    def __init__(self, message: str, part_name: Optional[str] = None) -> None:
        if part_name:
            message = f"{part_name}: {message}"
        super().__init__(message)
        self.part_name = part_name


class RecognitionError(PptxRendererError, RuntimeError):
    """The OCR collaborator failed, timed out, or could not read the image."""
