"""Common helpers shared by renderer implementations."""
from __future__ import annotations

import base64
import html
from typing import Dict

from pptx_renderer.model.elements import MediaAsset, TextRun


def run_to_css(run: TextRun) -> Dict[str, str]:
    """Convert run character properties into CSS properties."""
    css: Dict[str, str] = {}
    if run.bold:
        css["font-weight"] = "700"
    if run.italic:
        css["font-style"] = "italic"
    if run.underline:
        css["text-decoration"] = "underline"
    return css


def css_declarations(css: Dict[str, str]) -> str:
    return "; ".join(f"{key}: {value}" for key, value in css.items())


def escape_text(text: str) -> str:
    return html.escape(text, quote=False)


def escape_attr(value: str) -> str:
    return html.escape(value, quote=True)


def data_uri(asset: MediaAsset) -> str:
    encoded = base64.b64encode(asset.data).decode("ascii")
    return f"data:{asset.media_type};base64,{encoded}"
