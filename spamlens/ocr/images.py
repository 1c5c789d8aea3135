"""
Image loading and normalisation for OCR uploads.
"""

from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError

from spamlens.ocr import InvalidImageError

logger = logging.getLogger(__name__)


def load_image(image_bytes: bytes) -> Image.Image:
    """Decode uploaded bytes into an RGB PIL image."""
    if not image_bytes:
        raise InvalidImageError("Empty upload")
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Rejected upload that is not an image: %s", e)
        raise InvalidImageError("Uploaded file is not a readable image") from e
    return image.convert("RGB")


def to_png_bytes(image_bytes: bytes) -> bytes:
    """Re-encode any supported image as PNG, the format sent to providers."""
    image = load_image(image_bytes)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
