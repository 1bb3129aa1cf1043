"""Image helpers: decode user-selected images and re-encode them as JPEG bytes."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterable

import structlog
from PIL import Image, UnidentifiedImageError

logger = structlog.get_logger(__name__)

DEFAULT_JPEG_QUALITY = 80


class ImageDecodeError(ValueError):
    """Raised when bytes cannot be decoded as an image."""


def encode_jpeg(data: bytes, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Decode ``data`` into a bitmap and compress it to JPEG at ``quality``."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            bitmap = image.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError(str(exc)) from exc
    buffer = io.BytesIO()
    bitmap.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def encode_images(
    sources: Iterable[bytes], quality: int = DEFAULT_JPEG_QUALITY
) -> tuple[bytes | None, list[bytes]]:
    """Return ``(primary, additional)``: first decodable image is primary."""
    encoded: list[bytes] = []
    for index, data in enumerate(sources):
        try:
            encoded.append(encode_jpeg(data, quality=quality))
        except ImageDecodeError as exc:
            logger.warning("images.skipped", index=index, error=str(exc))
    if not encoded:
        return None, []
    return encoded[0], encoded[1:]


def load_image_files(paths: Iterable[Path]) -> list[bytes]:
    return [path.read_bytes() for path in paths]
