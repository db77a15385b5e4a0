"""
Module: images.transform

Purpose:
    Stateless pixel operations on image buffers: decode, resize to
    bounds (with portrait canonicalisation), right-angle rotation and
    JPEG/PNG encoding. Knows nothing about photos as entities.

Key Functions:
    - decode(): Bytes -> fully loaded PIL image
    - resize_to_bounds(): Aspect-preserving downscale, portrait -> landscape
    - rotate(): Right-angle rotation on a white background
    - encode(): PIL image -> bytes at a quality in [0, 1]
    - compress_once(): The single import-time compression pass

Dependencies:
    - PIL: Image manipulation

Used By:
    - images.importer: Import path
    - images.rotation: Export-time display images
    - output.renderer: Logo and photo decoding
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field

from PIL import Image, ImageOps, UnidentifiedImageError

from photo_report.core.errors import DecodeError, InvalidAngleError, ValidationError

logger = logging.getLogger(__name__)

# Stored originals target ~200 DPI across the printable photo area
DEFAULT_MAX_WIDTH = 1600
DEFAULT_MAX_HEIGHT = 1200

IMPORT_QUALITY = 0.95
EXPORT_QUALITY = 0.90

BACKGROUND = (255, 255, 255)

# PIL transpose operations for counter-clockwise rotation by angle.
# Display rotation is clockwise, so 90 maps to ROTATE_270.
_CLOCKWISE_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


@dataclass(frozen=True)
class ProcessedImage:
    """
    Encoded image with its pixel size (immutable).

    Attributes:
        data: Encoded bytes
        width: Pixel width
        height: Pixel height
    """

    data: bytes = field(repr=False)
    width: int
    height: int


def decode(data: bytes) -> Image.Image:
    """
    Decode image bytes into a fully loaded PIL image.

    The image is loaded eagerly so truncated files fail here rather than
    later during drawing.

    Raises:
        DecodeError: If the bytes are empty, corrupt or unsupported
    """
    if not data:
        raise DecodeError("Empty image buffer")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Cannot decode image: {e}") from e
    return img


def flatten(img: Image.Image) -> Image.Image:
    """
    Return an RGB copy of img composited over a white background.

    Transparent pixels become white instead of black when the image is
    later saved as JPEG.
    """
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        canvas = Image.new("RGB", rgba.size, BACKGROUND)
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        return canvas
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def resize_to_bounds(
    img: Image.Image,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
    *,
    canonicalize: bool = True,
) -> Image.Image:
    """
    Scale img to fit within (max_width, max_height), preserving aspect.

    Never upscales. EXIF orientation is applied first so camera photos
    are measured as they are seen. When canonicalize is True and the
    scaled image is portrait (height > width) it is rotated 90 degrees
    clockwise so stored originals are always landscape.

    Args:
        img: Source image
        max_width: Width bound in pixels
        max_height: Height bound in pixels
        canonicalize: Rotate portrait results to landscape

    Returns:
        New RGB image

    Example:
        >>> resize_to_bounds(Image.new("RGB", (3200, 1200))).size
        (1600, 600)
    """
    if max_width <= 0 or max_height <= 0:
        raise ValidationError(f"Bounds must be positive: {max_width}x{max_height}")

    img = flatten(ImageOps.exif_transpose(img))
    width, height = img.size

    if width > max_width or height > max_height:
        ratio = min(max_width / width, max_height / height)
        new_size = (max(1, int(width * ratio)), max(1, int(height * ratio)))
        img = img.resize(new_size, Image.Resampling.LANCZOS)
        logger.debug(f"Resized {width}x{height} -> {new_size[0]}x{new_size[1]}")
    else:
        img = img.copy()

    if canonicalize and img.height > img.width:
        img = img.transpose(_CLOCKWISE_TRANSPOSE[90])
        logger.debug(f"Canonicalised portrait image to {img.width}x{img.height}")

    return img


def rotate(img: Image.Image, angle: int) -> Image.Image:
    """
    Rotate img clockwise by a right angle about its centre.

    The output canvas swaps width and height for 90/270 and keeps them
    for 0/180. The source is composited onto white first so no
    transparent or black fringe survives into the JPEG.

    Raises:
        InvalidAngleError: If angle is not 0, 90, 180 or 270
    """
    if angle not in (0, 90, 180, 270):
        raise InvalidAngleError(f"Rotation must be 0, 90, 180 or 270, got {angle!r}")
    flat = flatten(img)
    if angle == 0:
        return flat.copy()
    return flat.transpose(_CLOCKWISE_TRANSPOSE[angle])


def encode(img: Image.Image, fmt: str = "JPEG", quality: float = IMPORT_QUALITY) -> bytes:
    """
    Encode img to bytes.

    Args:
        img: Image to encode
        fmt: PIL format name ("JPEG" or "PNG")
        quality: Lossy quality in [0, 1]; mapped to PIL's 1-100 scale

    Raises:
        ValidationError: If quality is outside [0, 1]
    """
    if not 0.0 <= quality <= 1.0:
        raise ValidationError(f"quality must be in [0, 1]: {quality}")
    buf = io.BytesIO()
    fmt = fmt.upper()
    if fmt in ("JPEG", "JPG"):
        flatten(img).save(
            buf,
            format="JPEG",
            quality=max(1, round(quality * 100)),
            optimize=True,
        )
    else:
        img.save(buf, format=fmt)
    return buf.getvalue()


def compress_once(
    data: bytes,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
    quality: float = IMPORT_QUALITY,
) -> ProcessedImage:
    """
    Run the one-and-only compression pass applied at import.

    decode -> resize/canonicalise -> JPEG at high quality. The result is
    what PhotoEntity.original_image freezes.

    Raises:
        DecodeError: If data cannot be decoded
    """
    img = decode(data)
    resized = resize_to_bounds(img, max_width, max_height)
    encoded = encode(resized, "JPEG", quality)
    return ProcessedImage(data=encoded, width=resized.width, height=resized.height)
