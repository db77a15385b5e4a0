"""
Module: images.heic

Purpose:
    HEIC/HEIF -> JPEG conversion collaborator. HEIC input never enters
    the pipeline directly; it is converted here first, then goes through
    the normal import compression like any JPEG.

Key Classes:
    - HeicConverter: Converts HEIC bytes to JPEG bytes

Dependencies:
    - pillow_heif: HEIF decoding
    - PIL: Re-encoding as JPEG

Used By:
    - images.importer: Import path
"""

from __future__ import annotations

import io
import logging

import pillow_heif
from PIL import Image, ImageOps

from photo_report.core.errors import DecodeError

from .transform import IMPORT_QUALITY, encode

logger = logging.getLogger(__name__)


class HeicConverter:
    """
    Convert HEIC/HEIF images to JPEG.

    Example:
        >>> jpeg_bytes = HeicConverter().convert(heic_bytes)
    """

    def __init__(self, quality: float = IMPORT_QUALITY) -> None:
        self._quality = quality

    def convert(self, data: bytes, name: str = "<memory>") -> bytes:
        """
        Convert HEIC bytes to JPEG bytes.

        Only the primary image of a sequence is kept. EXIF orientation is
        applied so the JPEG looks the way the camera showed it.

        Raises:
            DecodeError: If the data is not a readable HEIF container
        """
        logger.info(f"Converting HEIC to JPEG: {name}")
        try:
            heif_file = pillow_heif.open_heif(io.BytesIO(data))
            img = Image.frombytes(
                heif_file.mode,
                heif_file.size,
                heif_file.data,
                "raw",
                heif_file.mode,
                heif_file.stride,
            )
            if heif_file.info.get("exif"):
                img.info["exif"] = heif_file.info["exif"]
                img = ImageOps.exif_transpose(img)
        except (ValueError, OSError, RuntimeError) as e:
            raise DecodeError(f"Cannot convert HEIC {name}: {e}") from e
        return encode(img, "JPEG", self._quality)
