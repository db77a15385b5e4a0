"""
Module: images.rotation

Purpose:
    Lossless rotation model. Rotation is stored as metadata on the
    PhotoEntity; pixels are only rotated when a display image is needed
    at export, and always from the frozen original. Any number of
    rotation edits therefore costs zero quality.

Key Classes:
    - RotationModel: set_rotation() and resolve_display_image()

Dependencies:
    - images.transform: decode/rotate/encode

Used By:
    - collection.positioned: Rotation edits
    - controller: Export-time display images
"""

from __future__ import annotations

import logging

from photo_report.core.models import PhotoEntity, validate_angle

from . import transform
from .transform import EXPORT_QUALITY

logger = logging.getLogger(__name__)


class RotationModel:
    """
    Map (original image, rotation angle) to a display image.

    Attributes:
        export_quality: JPEG quality for rotated display images

    Example:
        >>> model = RotationModel()
        >>> rotated = model.set_rotation(photo, 90)
        >>> data = model.resolve_display_image(rotated)
    """

    def __init__(self, export_quality: float = EXPORT_QUALITY) -> None:
        self.export_quality = export_quality

    def set_rotation(self, entity: PhotoEntity, angle: int) -> PhotoEntity:
        """
        Return entity with its rotation metadata set to angle.

        Metadata only; no pixel processing happens here. Returns the
        same object when the angle is unchanged.

        Raises:
            InvalidAngleError: If angle is not 0, 90, 180 or 270
        """
        validate_angle(angle)
        if entity.rotation == angle:
            return entity
        logger.debug(f"Photo {entity.id}: rotation {entity.rotation} -> {angle}")
        return entity.with_rotation(angle)

    def resolve_display_image(self, entity: PhotoEntity) -> bytes:
        """
        Compute the display image for entity.

        Angle 0 returns original_image unchanged (byte-identical).
        Otherwise the original is rotated once by the stored angle and
        re-encoded at export_quality. The result is never written back.

        Raises:
            DecodeError: If the original cannot be decoded
        """
        if entity.rotation == 0:
            return entity.original_image
        img = transform.decode(entity.original_image)
        rotated = transform.rotate(img, entity.rotation)
        return transform.encode(rotated, "JPEG", self.export_quality)
