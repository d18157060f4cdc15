# =============================================================================
# lib/images.py - Image Resizing
# =============================================================================
# Turns uploaded image bytes into web-ready JPEGs using Pillow.
#
# Presets:
# - product main:   fit inside 1200x1200, never enlarged, quality 85
# - product thumb:  300x300 cover crop (centered), quality 80
# - artist profile: 500x500 cover crop, quality 85
# - artist cover:   1200x400 cover crop, quality 85
#
# Usage:
#   from lib.images import process_image, PRODUCT_MAIN
#   jpeg_bytes = process_image(raw_bytes, PRODUCT_MAIN)
# =============================================================================

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Literal

from PIL import Image, ImageOps, UnidentifiedImageError

from lib.utils import ApplicationError


@dataclass(frozen=True)
class ResizeSpec:
    """
    How to resize an image.

    - inside: shrink to fit within width x height keeping aspect ratio
    - cover: scale and center-crop to exactly width x height
    """
    width: int
    height: int
    fit: Literal["inside", "cover"]
    quality: int = 85


PRODUCT_MAIN = ResizeSpec(1200, 1200, "inside", quality=85)
PRODUCT_THUMBNAIL = ResizeSpec(300, 300, "cover", quality=80)
ARTIST_PROFILE = ResizeSpec(500, 500, "cover", quality=85)
ARTIST_COVER = ResizeSpec(1200, 400, "cover", quality=85)

ARTIST_PRESETS = {
    "profile": ARTIST_PROFILE,
    "cover": ARTIST_COVER,
}


class ImageProcessingFailure(ApplicationError):
    """Raised when bytes cannot be decoded or re-encoded as an image."""

    def __init__(self, message: str):
        super().__init__(
            message,
            code="IMAGE_PROCESSING_FAILED",
            suggestion="Upload a valid JPEG, PNG, GIF or WebP image",
        )


def _open(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Image.DecompressionBombError as e:
        raise ImageProcessingFailure(f"Image dimensions too large: {e}")
    except (UnidentifiedImageError, OSError) as e:
        raise ImageProcessingFailure(f"Unreadable image: {e}")

    # Respect camera orientation, then flatten to RGB for JPEG output
    image = ImageOps.exif_transpose(image)
    if image.mode in ("RGBA", "LA", "P"):
        image = image.convert("RGBA")
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        return background
    return image.convert("RGB")


def resize(image: Image.Image, preset: ResizeSpec) -> Image.Image:
    """Apply a ResizeSpec to an already-decoded image."""
    if preset.fit == "cover":
        return ImageOps.fit(
            image,
            (preset.width, preset.height),
            method=Image.Resampling.LANCZOS,
            centering=(0.5, 0.5),
        )

    resized = image.copy()
    # thumbnail() only ever shrinks
    resized.thumbnail((preset.width, preset.height), Image.Resampling.LANCZOS)
    return resized


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality, progressive=True, optimize=True)
    return buffer.getvalue()


def process_image(data: bytes, preset: ResizeSpec) -> bytes:
    """
    Decode, resize and re-encode image bytes as a progressive JPEG.

    Args:
        data: Raw uploaded bytes (any format Pillow can read)
        preset: Target size and fit

    Returns:
        JPEG bytes

    Raises:
        ImageProcessingFailure: If the bytes are not a readable image
    """
    image = _open(data)
    return encode_jpeg(resize(image, preset), preset.quality)


def image_size(data: bytes) -> tuple[int, int]:
    """Return (width, height) of encoded image bytes."""
    with Image.open(io.BytesIO(data)) as image:
        return image.size
