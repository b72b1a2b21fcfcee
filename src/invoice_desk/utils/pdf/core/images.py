"""
Logo loading: fetch bytes from an http(s) URL, a data: URL or a local path,
decode with Pillow and keep raw RGB (+ alpha mask) ready for a PDF image XObject.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import warnings
import zlib
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote_to_bytes

import httpx
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Logos are drawn at 48pt; anything above this is wasted bytes.
MAX_LOGO_PX = 256


class ImageLoadError(Exception):
    """The logo could not be fetched or decoded."""


@dataclass(frozen=True)
class PdfImage:
    width: int
    height: int
    rgb: bytes  # Flate-compressed, 8 bits per component
    alpha: bytes | None = None  # Flate-compressed DeviceGray soft mask


def fetch_image_bytes(source: str, timeout: float = 5.0) -> bytes:
    src = (source or "").strip()
    if not src:
        raise ImageLoadError("empty image source")
    if src.startswith("data:"):
        header, _, payload = src.partition(",")
        try:
            if header.endswith(";base64"):
                return base64.b64decode(payload, validate=False)
            return unquote_to_bytes(payload)
        except (binascii.Error, ValueError) as exc:
            raise ImageLoadError(f"invalid data URL: {exc}") from exc
    if src.startswith(("http://", "https://")):
        try:
            resp = httpx.get(src, timeout=timeout, follow_redirects=True)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ImageLoadError(f"{type(exc).__name__}: {exc}") from exc
        return resp.content
    path = Path(src[7:] if src.startswith("file://") else src)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ImageLoadError(f"cannot read {path}: {exc}") from exc


def decode_image(data: bytes) -> PdfImage:
    """Oversized images count as undecodable, whether Pillow warns or refuses."""
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", Image.DecompressionBombWarning)
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                img.thumbnail((MAX_LOGO_PX, MAX_LOGO_PX))
                has_alpha = img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info
                if has_alpha:
                    rgba = img.convert("RGBA")
                    rgb = rgba.convert("RGB")
                    alpha = rgba.getchannel("A")
                else:
                    rgb = img.convert("RGB")
                    alpha = None
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        Image.DecompressionBombWarning,
        OSError,
        ValueError,
    ) as exc:
        raise ImageLoadError(f"cannot decode image: {exc}") from exc
    return PdfImage(
        width=rgb.width,
        height=rgb.height,
        rgb=zlib.compress(rgb.tobytes()),
        alpha=zlib.compress(alpha.tobytes()) if alpha is not None else None,
    )


def load_logo(source: str, timeout: float = 5.0) -> PdfImage:
    data = fetch_image_bytes(source, timeout=timeout)
    image = decode_image(data)
    logger.debug("Loaded logo %s (%dx%d)", source[:60], image.width, image.height)
    return image
