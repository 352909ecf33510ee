"""Helpers to persist intermediate representations for debugging."""
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any
from xml.etree import ElementTree as ET

from pptx_renderer.model.presentation_model import PresentationModel
from pptx_renderer.parser.media_extractor import MediaCatalog
from pptx_renderer.parser.rels_parser import Relationships


class DebugDumper:
    """Writes intermediate artifacts onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, model: PresentationModel) -> Path:
        """Persist the presentation model as JSON for offline analysis."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / "presentation_model.json"
        target.write_text(json.dumps(self._serialize(model), indent=2), encoding="utf-8")
        return target

    def _serialize(self, value: Any) -> Any:
        if isinstance(value, Relationships):
            return [self._serialize(rel) for rel in value.iter_all()]
        if isinstance(value, MediaCatalog):
            return {path: self._serialize(asset) for path, asset in value.assets.items()}
        if isinstance(value, ET.Element):
            return {"root": value.tag, "elements": sum(1 for _ in value.iter())}
        if is_dataclass(value) and not isinstance(value, type):
            payload = {"kind": type(value).__name__}
            payload.update({f.name: self._serialize(getattr(value, f.name)) for f in fields(value)})
            return payload
        if isinstance(value, bytes):
            return {"bytes": len(value)}
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict) or hasattr(value, "items"):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
