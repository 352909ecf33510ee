"""Builders for in-memory PPTX packages used across the test suite."""
from __future__ import annotations

import io
import struct
import zipfile
from typing import Dict, Iterable, Mapping, Optional, Sequence

from PIL import Image

P_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
IMAGE_REL = f"{R_NS}/image"
LAYOUT_REL = f"{R_NS}/slideLayout"

ROOT_RELS = f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="{PKG_REL_NS}">
  <Relationship Id="rId1" Type="{R_NS}/officeDocument" Target="ppt/presentation.xml"/>
</Relationships>"""


def presentation_xml(slide_count: int, cx: int = 12192000, cy: int = 6858000) -> str:
    ids = "".join(f'<p:sldId id="{255 + n}" r:id="rId{n + 1}"/>' for n in range(1, slide_count + 1))
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<p:presentation xmlns:p="{P_NS}" xmlns:r="{R_NS}">'
        f"<p:sldIdLst>{ids}</p:sldIdLst>"
        f'<p:sldSz cx="{cx}" cy="{cy}"/>'
        f"</p:presentation>"
    )


def run_xml(text: str, bold: bool = False, italic: bool = False) -> str:
    attrs = ""
    if bold:
        attrs += ' b="1"'
    if italic:
        attrs += ' i="1"'
    props = f'<a:rPr lang="en-US"{attrs}/>'
    return f"<a:r>{props}<a:t>{text}</a:t></a:r>"


def text_shape(paragraphs: Sequence[Sequence[str]], shape_id: int = 2, name: str = "TextBox") -> str:
    body = "".join("<a:p>" + "".join(run_xml(text) for text in runs) + "</a:p>" for runs in paragraphs)
    return (
        f'<p:sp><p:nvSpPr><p:cNvPr id="{shape_id}" name="{name}"/><p:cNvSpPr/><p:nvPr/></p:nvSpPr>'
        f"<p:spPr/><p:txBody><a:bodyPr/><a:lstStyle/>{body}</p:txBody></p:sp>"
    )


def picture(r_id: Optional[str], shape_id: int = 3, name: str = "Picture", descr: str = "") -> str:
    blip = f'<a:blip r:embed="{r_id}"/>' if r_id else "<a:blip/>"
    return (
        f'<p:pic><p:nvPicPr><p:cNvPr id="{shape_id}" name="{name}" descr="{descr}"/>'
        f"<p:cNvPicPr/><p:nvPr/></p:nvPicPr>"
        f"<p:blipFill>{blip}<a:stretch><a:fillRect/></a:stretch></p:blipFill><p:spPr/></p:pic>"
    )


def group(children: Iterable[str], shape_id: int = 10, name: str = "Group") -> str:
    return (
        f'<p:grpSp><p:nvGrpSpPr><p:cNvPr id="{shape_id}" name="{name}"/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
        f"<p:grpSpPr/>{''.join(children)}</p:grpSp>"
    )


def slide_xml(shapes: Iterable[str] = ()) -> str:
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<p:sld xmlns:a="{A_NS}" xmlns:p="{P_NS}" xmlns:r="{R_NS}"><p:cSld><p:spTree>'
        f'<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr><p:grpSpPr/>'
        f"{''.join(shapes)}"
        f"</p:spTree></p:cSld></p:sld>"
    )


def rels_xml(targets: Mapping[str, str], rel_type: str = IMAGE_REL) -> str:
    entries = "".join(
        f'<Relationship Id="{r_id}" Type="{rel_type}" Target="{target}"/>' for r_id, target in targets.items()
    )
    return f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?><Relationships xmlns="{PKG_REL_NS}">{entries}</Relationships>'


def png_bytes(width: int = 4, height: int = 3, color: str = "white") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def build_parts(
    slides: Mapping[int, str],
    slide_rels: Optional[Mapping[int, str]] = None,
    media: Optional[Mapping[str, bytes]] = None,
    extra: Optional[Mapping[str, str]] = None,
    omit: Iterable[str] = (),
) -> Dict[str, bytes]:
    """Assemble entry-name → bytes for a minimal presentation package."""
    parts: Dict[str, bytes] = {
        "_rels/.rels": ROOT_RELS.encode("utf-8"),
        "ppt/presentation.xml": presentation_xml(len(slides)).encode("utf-8"),
    }
    for number, xml in slides.items():
        parts[f"ppt/slides/slide{number}.xml"] = xml.encode("utf-8")
    for number, xml in (slide_rels or {}).items():
        parts[f"ppt/slides/_rels/slide{number}.xml.rels"] = xml.encode("utf-8")
    for path, data in (media or {}).items():
        parts[path] = data
    for path, xml in (extra or {}).items():
        parts[path] = xml.encode("utf-8")
    for name in omit:
        parts.pop(name, None)
    return parts


def build_pptx(*args, **kwargs) -> bytes:
    """Zip the parts produced by :func:`build_parts` into PPTX bytes."""
    parts = build_parts(*args, **kwargs)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name in sorted(parts):
            archive.writestr(name, parts[name])
    return buffer.getvalue()


def corrupt_entry(data: bytes, name: str) -> bytes:
    """Overwrite the compressed payload of ``name`` with an undecodable deflate stream."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        info = archive.getinfo(name)
    raw = bytearray(data)
    offset = info.header_offset
    name_len, extra_len = struct.unpack("<HH", raw[offset + 26 : offset + 30])
    start = offset + 30 + name_len + extra_len
    raw[start : start + info.compress_size] = b"\xff" * info.compress_size
    return bytes(raw)
