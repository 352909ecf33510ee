"""
PPTX Media Extractor

Reads every entry under ``ppt/media/`` and catalogs it with format and pixel
metadata, whether or not a slide references it.
"""
from __future__ import annotations

import io
import mimetypes
import posixpath
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, List, Optional

from PIL import Image

from pptx_renderer.model.elements import ImageMetadata, MediaAsset
from pptx_renderer.parser.pptx_loader import PptxPackage
from pptx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

MEDIA_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".svg": "image/svg+xml",
    ".emf": "image/x-emf",
    ".wmf": "image/x-wmf",
    ".wdp": "image/vnd.ms-photo",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".mp4": "video/mp4",
    ".avi": "video/x-msvideo",
}


class PillowImageProber:
    """Reads format and pixel dimensions of raw image bytes with Pillow."""

    def probe(self, data: bytes) -> ImageMetadata:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
            fmt = image.format.lower() if image.format else None
        return ImageMetadata(format=fmt, width=width, height=height)


@dataclass(frozen=True)
class MediaCatalog:
    """All media assets of a package, keyed by normalized full path."""

    assets: Dict[str, MediaAsset]

    def get(self, path: Optional[str]) -> Optional[MediaAsset]:
        """Exact lookup by package path; ``None`` when nothing matches."""
        if not path:
            return None
        return self.assets.get(posixpath.normpath(path.lstrip("/")))

    @property
    def images(self) -> List[MediaAsset]:
        return [asset for asset in self.assets.values() if asset.is_image]

    def __len__(self) -> int:
        return len(self.assets)

    def __contains__(self, path: str) -> bool:
        return self.get(path) is not None


class MediaExtractor:
    """Extracts every media entry of a package into a :class:`MediaCatalog`."""

    def __init__(self, package: PptxPackage, prober: Optional[PillowImageProber] = None, max_workers: int = 4) -> None:
        self.package = package
        self.prober = prober or PillowImageProber()
        self.max_workers = max(1, max_workers)

    def extract_media_catalog(self) -> MediaCatalog:
        paths = self.package.media_parts()
        if not paths:
            return MediaCatalog(assets={})

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="media-probe") as pool:
            probed = list(pool.map(self._extract_asset, paths))

        assets = {asset.path: asset for asset in probed}
        LOGGER.info("Extracted %d media assets", len(assets))
        return MediaCatalog(assets=assets)

    def _extract_asset(self, path: str) -> MediaAsset:
        data = self.package.get_part_data(path) or b""
        media_type = self._get_media_type(path)
        metadata = self._probe(path, data, media_type)
        return MediaAsset(
            path=path,
            data=data,
            format=metadata.format,
            media_type=media_type,
            width=metadata.width,
            height=metadata.height,
        )

    def _probe(self, path: str, data: bytes, media_type: str) -> ImageMetadata:
        fallback = ImageMetadata(format=self._format_from_extension(path))
        if not media_type.startswith("image/"):
            return fallback
        try:
            metadata = self.prober.probe(data)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            LOGGER.warning("Could not probe image %s: %s", path, exc)
            return fallback
        if metadata.format is None:
            return ImageMetadata(format=fallback.format, width=metadata.width, height=metadata.height)
        return metadata

    @staticmethod
    def _get_media_type(path: str) -> str:
        """Determine MIME type from file extension."""
        ext = PurePosixPath(path).suffix.lower()
        if ext in MEDIA_TYPES:
            return MEDIA_TYPES[ext]
        mime_type, _ = mimetypes.guess_type(path)
        return mime_type or "application/octet-stream"

    @staticmethod
    def _format_from_extension(path: str) -> Optional[str]:
        ext = PurePosixPath(path).suffix.lower().lstrip(".")
        if not ext:
            return None
        return "jpeg" if ext == "jpg" else ext


def extract_media_from_package(package: PptxPackage, max_workers: int = 4) -> MediaCatalog:
    """Convenience function to extract the media catalog of a package."""
    return MediaExtractor(package, max_workers=max_workers).extract_media_catalog()
