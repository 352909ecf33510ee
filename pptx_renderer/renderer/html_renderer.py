"""Assemble slide fragments into a single HTML document."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable

from pptx_renderer.config import ConversionOptions
from pptx_renderer.model.presentation_model import PresentationInfo
from pptx_renderer.renderer.utils import escape_text


class HtmlRenderer:
    """Wraps per-slide fragments in a fixed document skeleton."""

    def __init__(self, options: ConversionOptions) -> None:
        self._options = options

    def build(self, fragments: Iterable[str], info: PresentationInfo) -> str:
        styles = self._build_styles(info) if self._options.include_styles else ""
        body = "\n".join(fragments)
        return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape_text(self._options.title)}</title>{styles}
</head>
<body>
{body}
</body>
</html>
"""

    def render(self, fragments: Iterable[str], info: PresentationInfo, output_path: Path) -> str:
        html = self.build(fragments, info)
        output_path.write_text(html, encoding="utf-8")
        return html

    def _build_styles(self, info: PresentationInfo) -> str:
        return f"""
  <style>
    .slide {{ position: relative; width: 100%; height: 0; padding-bottom: {info.aspect_percent:.4g}%; margin-bottom: 20px; background: white; }}
    .slide-content {{ position: absolute; top: 0; left: 0; width: 100%; height: 100%; overflow: hidden; }}
    .shape {{ box-sizing: border-box; word-wrap: break-word; overflow-wrap: break-word; }}
    .picture img {{ max-width: 100%; height: auto; }}
    .ocr-text {{ white-space: pre-wrap; }}
  </style>"""
