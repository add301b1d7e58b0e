# -*- coding: utf-8 -*-
"""Scan — food photo pre-processing (Pillow)."""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import settings

log = logging.getLogger(__name__)

OPTIMIZE_WARNING = "Image optimization failed; the original image was used."


@dataclass(frozen=True)
class PreparedImage:
    data: bytes
    mime: str
    width: Optional[int] = None
    height: Optional[int] = None
    optimized: bool = True
    warning: Optional[str] = None

    def data_url(self) -> str:
        b64 = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime};base64,{b64}"


def _flatten_to_rgb(img: Image.Image) -> Image.Image:
    if img.mode in ("RGBA", "LA", "P"):
        if img.mode == "P":
            img = img.convert("RGBA")
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def prepare_image(
    data: bytes,
    *,
    mime: str = "image/jpeg",
    max_edge: int | None = None,
    quality: int | None = None,
) -> PreparedImage:
    """Scale so the longer edge fits `max_edge` and re-encode as JPEG.

    Any decode failure returns the original bytes untouched with a warning.
    """
    edge = int(max_edge or settings.image_max_edge)
    q = int(quality or settings.image_jpeg_quality)
    try:
        with Image.open(io.BytesIO(data)) as raw:
            img = ImageOps.exif_transpose(raw)
            img = _flatten_to_rgb(img)
            if max(img.size) > edge:
                img.thumbnail((edge, edge), Image.Resampling.LANCZOS)
            buf = io.BytesIO()
            img.save(buf, format="JPEG", quality=q, optimize=True)
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        log.warning("Image pre-processing failed; using original bytes", exc_info=True)
        return PreparedImage(data=data, mime=mime, optimized=False, warning=OPTIMIZE_WARNING)

    return PreparedImage(data=buf.getvalue(), mime="image/jpeg", width=width, height=height)


def split_data_url(image_data_url: str) -> tuple[str, bytes]:
    """Return (mime, bytes) for a `data:<mime>;base64,<payload>` URL or bare base64.

    Raises ValueError on bad base64.
    """
    value = (image_data_url or "").strip()
    mime = "image/jpeg"
    payload = value
    if value.startswith("data:"):
        header, _, payload = value.partition(",")
        declared = header[len("data:") :].split(";", 1)[0].strip()
        if declared:
            mime = declared
    try:
        data = base64.b64decode(payload, validate=True)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Invalid base64 image: {exc}") from exc
    if not data:
        raise ValueError("Empty image payload")
    return mime, data
