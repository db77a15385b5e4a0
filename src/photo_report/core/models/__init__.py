"""
Core Models Package

Data models shared by the collection, rotation and layout layers.

PhotoEntity is a frozen dataclass: edits go through with_* helpers that
return a replaced copy, and the owning PhotoCollection is the only place
that swaps copies in. This keeps position bookkeeping in one place and
makes snapshots taken for export safe to hand to worker threads.
"""

from .photos import (
    MAX_CAPTION_LENGTH,
    VALID_ANGLES,
    PhotoEntity,
    caption_length,
    clamp_caption,
    normalize_angle,
    validate_angle,
)
from .case_id import CaseId, format_case_id, parse_case_id, pdf_filename

__all__ = [
    "MAX_CAPTION_LENGTH",
    "VALID_ANGLES",
    "PhotoEntity",
    "caption_length",
    "clamp_caption",
    "normalize_angle",
    "validate_angle",
    "CaseId",
    "format_case_id",
    "parse_case_id",
    "pdf_filename",
]
