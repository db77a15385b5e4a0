"""
Module: layout.paginator

Purpose:
    Arrange photo blocks onto fixed-capacity pages.

Key Functions:
    - paginate(): Main pagination function
    - fit_within(): Aspect-preserving fit of an image into a box

Algorithm:
    1. Reject an empty sequence (a report needs at least one photo)
    2. Order blocks by position
    3. Partition into contiguous groups of photos_per_page (last may be short)
    4. Group i becomes page i; page 0 also carries the title
    5. Each block gets a fixed slot: photo box centred horizontally,
       image fitted inside it, caption line below

Dependencies:
    - layout.models: PhotoBlock, PagePlan, LayoutResult
    - layout.config: LayoutConfig

Used By:
    - controller: Export pipeline
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from photo_report.core.errors import EmptyDocumentError
from photo_report.core.models import MAX_CAPTION_LENGTH, caption_length

from .config import LayoutConfig
from .models import BlockPlacement, LayoutResult, PagePlan, PhotoBlock, Rect

logger = logging.getLogger(__name__)


def paginate(
    blocks: Sequence[PhotoBlock],
    config: LayoutConfig,
) -> LayoutResult:
    """
    Arrange photo blocks onto pages.

    Args:
        blocks: Photo blocks (any order; sorted by position here)
        config: Layout configuration

    Returns:
        LayoutResult with one PagePlan per group of photos_per_page blocks

    Raises:
        EmptyDocumentError: If blocks is empty

    Example:
        >>> result = paginate(five_blocks, LayoutConfig(photos_per_page=2))
        >>> [p.placement_count for p in result.pages]
        [2, 2, 1]
    """
    if not blocks:
        raise EmptyDocumentError("Add at least one photo before generating the report")

    ordered = sorted(blocks, key=lambda b: b.position)
    per_page = config.photos_per_page
    warnings: List[str] = []
    pages: List[PagePlan] = []

    for page_index, start in enumerate(range(0, len(ordered), per_page)):
        group = ordered[start:start + per_page]
        has_title = page_index == 0
        top = config.content_top + (config.title_height if has_title else 0)

        placements = []
        for block in group:
            if caption_length(block.caption) > MAX_CAPTION_LENGTH:
                warnings.append(
                    f"Caption for photo {block.position} exceeds {MAX_CAPTION_LENGTH} characters"
                )
            placements.append(_place_block(block, top, config))
            top += config.block_height

        pages.append(PagePlan(
            index=page_index,
            placements=tuple(placements),
            has_title=has_title,
        ))

    logger.info(f"Paginated {len(ordered)} photos onto {len(pages)} pages")

    return LayoutResult(pages=tuple(pages), warnings=warnings)


def _place_block(block: PhotoBlock, top: float, config: LayoutConfig) -> BlockPlacement:
    """Position one block in the slot starting at top."""
    frame = Rect(
        x=config.padding + (config.content_width - config.photo_box_width) / 2,
        top=top,
        width=config.photo_box_width,
        height=config.photo_box_height,
    )
    return BlockPlacement(
        block=block,
        frame=frame,
        image_rect=fit_within(block.width, block.height, frame),
        caption_top=frame.bottom + config.caption_gap,
    )


def fit_within(width: int, height: int, frame: Rect) -> Rect:
    """
    Scale (width, height) to fit inside frame, preserving aspect ratio.

    The result is centred in frame and never cropped. Images larger or
    smaller than the frame are scaled to touch its limiting edge, the
    same as CSS object-fit: contain.

    Example:
        >>> fit_within(1600, 1200, Rect(0, 0, 400, 400))
        Rect(x=0.0, top=50.0, width=400.0, height=300.0)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image size {width}x{height}")
    scale = min(frame.width / width, frame.height / height)
    fitted_w = width * scale
    fitted_h = height * scale
    return Rect(
        x=frame.x + (frame.width - fitted_w) / 2,
        top=frame.top + (frame.height - fitted_h) / 2,
        width=fitted_w,
        height=fitted_h,
    )
