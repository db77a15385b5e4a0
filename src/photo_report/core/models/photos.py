"""
Module: core.models.photos

Purpose:
    The PhotoEntity dataclass - one imported photo with its frozen
    original image, display rotation metadata, caption and position.

Key Functions:
    - PhotoEntity.create(): Build a new entity with a fresh id
    - caption_length(): Caption length in UTF-16 code units
    - clamp_caption(): Enforce the caption bound by truncation
    - normalize_angle(): Reduce any right angle to 0/90/180/270
    - PhotoEntity.to_dict() / from_dict(): JSON metadata record

Dependencies:
    - dataclasses (std)
    - uuid (std)

Used By:
    - collection.positioned: PhotoCollection
    - collection.store: PhotoStore implementations
    - images.rotation: RotationModel
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict

from ..errors import InvalidAngleError

MAX_CAPTION_LENGTH = 78
VALID_ANGLES = (0, 90, 180, 270)


def caption_length(text: str) -> int:
    """Caption length in UTF-16 code units; characters outside the BMP count twice."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def clamp_caption(text: str | None) -> str:
    """
    Truncate caption text to MAX_CAPTION_LENGTH UTF-16 code units.

    Excess is dropped rather than rejected so pasted text never loses
    the whole edit. A character that would straddle the bound is dropped
    whole, so surrogate pairs are never split.

    Example:
        >>> len(clamp_caption("x" * 100))
        78
        >>> len(clamp_caption("x" * 77 + "\\U0001F600"))
        77
    """
    if not text:
        return ""
    if caption_length(text) <= MAX_CAPTION_LENGTH:
        return text
    units = 0
    for index, char in enumerate(text):
        units += 2 if ord(char) > 0xFFFF else 1
        if units > MAX_CAPTION_LENGTH:
            return text[:index]
    return text


def validate_angle(angle: int) -> int:
    """Return angle unchanged if it is a valid rotation, else raise."""
    if isinstance(angle, bool) or not isinstance(angle, int) or angle not in VALID_ANGLES:
        raise InvalidAngleError(
            f"Rotation must be one of {VALID_ANGLES}, got {angle!r}"
        )
    return angle


def normalize_angle(angle: int) -> int:
    """
    Reduce a multiple of 90 (possibly negative) to 0/90/180/270.

    Example:
        >>> normalize_angle(-90)
        270
        >>> normalize_angle(450)
        90
    """
    if isinstance(angle, bool) or not isinstance(angle, int) or angle % 90 != 0:
        raise InvalidAngleError(f"Rotation must be a multiple of 90, got {angle!r}")
    return angle % 360


@dataclass(frozen=True)
class PhotoEntity:
    """
    A single photo in the report (immutable).

    Edits produce a replaced copy; the owning PhotoCollection swaps the
    copy in and persists it.

    Attributes:
        id: Opaque unique identifier
        original_image: Encoded JPEG bytes frozen at import time
        width: Pixel width of original_image
        height: Pixel height of original_image
        position: 1-based rank in the report
        rotation: Display rotation in degrees (0/90/180/270)
        caption: Caption text, at most 78 characters
        created_at: ISO timestamp of import
    """

    id: str
    original_image: bytes = field(repr=False)
    width: int
    height: int
    position: int = 0
    rotation: int = 0
    caption: str = ""
    created_at: str = ""

    def __post_init__(self) -> None:
        """Validate invariants on construction."""
        if not self.id:
            raise ValueError("id must be non-empty")
        if not self.original_image:
            raise ValueError(f"original_image must be non-empty for {self.id}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid image size {self.width}x{self.height}")
        if self.position < 0:
            raise ValueError(f"position must be >= 0: {self.position}")
        validate_angle(self.rotation)
        if caption_length(self.caption) > MAX_CAPTION_LENGTH:
            raise ValueError(
                f"caption exceeds {MAX_CAPTION_LENGTH} UTF-16 units; use clamp_caption()"
            )

    @classmethod
    def create(cls, original_image: bytes, width: int, height: int) -> "PhotoEntity":
        """Create an unpositioned entity with a fresh id."""
        return cls(
            id=uuid.uuid4().hex,
            original_image=original_image,
            width=width,
            height=height,
            created_at=datetime.now().isoformat(timespec="seconds"),
        )

    @property
    def display_size(self) -> tuple[int, int]:
        """(width, height) after applying the rotation metadata."""
        if self.rotation in (90, 270):
            return self.height, self.width
        return self.width, self.height

    def with_position(self, position: int) -> "PhotoEntity":
        return replace(self, position=position)

    def with_rotation(self, rotation: int) -> "PhotoEntity":
        return replace(self, rotation=validate_angle(rotation))

    def with_caption(self, caption: str | None) -> "PhotoEntity":
        return replace(self, caption=clamp_caption(caption))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize metadata (image bytes are stored separately)."""
        return {
            "id": self.id,
            "width": self.width,
            "height": self.height,
            "position": self.position,
            "rotation": self.rotation,
            "caption": self.caption,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], original_image: bytes) -> "PhotoEntity":
        """Rebuild an entity from a metadata record and its image bytes."""
        return cls(
            id=str(data["id"]),
            original_image=original_image,
            width=int(data["width"]),
            height=int(data["height"]),
            position=int(data.get("position", 0)),
            rotation=int(data.get("rotation", 0)),
            caption=clamp_caption(data.get("caption", "")),
            created_at=str(data.get("created_at", "")),
        )
