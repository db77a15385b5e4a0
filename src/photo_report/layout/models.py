"""
Module: layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing photo blocks, their placements
    and the resulting pages.

Key Classes:
    - PageRegion: Regions a page can carry, in drawing order
    - PhotoBlock: Renderable photo + caption
    - Rect: Axis-aligned box in top-down page coordinates
    - BlockPlacement: Block positioned on a page
    - PagePlan: Complete page layout
    - LayoutResult: Final layout output

Dependencies:
    - dataclasses (std)

Used By:
    - layout.paginator: Creates PagePlans
    - output.renderer: Draws PagePlans
    - controller: Builds PhotoBlocks from resolved images
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

CAPTION_PLACEHOLDER = "Sem descrição"


class PageRegion(str, Enum):
    """Page regions in drawing order."""

    HEADER = "header"
    TITLE = "title"
    CONTENT = "content"
    FOOTER = "footer"


@dataclass(frozen=True)
class PhotoBlock:
    """
    A photo ready for layout (immutable).

    Attributes:
        photo_id: Id of the source PhotoEntity
        position: 1-based position in the report
        caption: Caption text (may be empty)
        image: Display image bytes (rotation already applied)
        width: Display image pixel width
        height: Display image pixel height
    """

    photo_id: str
    position: int
    caption: str
    image: bytes = field(repr=False)
    width: int
    height: int

    @property
    def caption_text(self) -> str:
        """Caption to print; a placeholder when empty."""
        return self.caption or CAPTION_PLACEHOLDER


@dataclass(frozen=True)
class Rect:
    """
    Box in points, measured from the page's top-left corner.

    Example:
        >>> Rect(10, 20, 100, 50).bottom
        70
    """

    x: float
    top: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2


@dataclass(frozen=True)
class BlockPlacement:
    """
    A photo block positioned on a page.

    Attributes:
        block: The PhotoBlock to draw
        frame: The fixed photo box for this slot
        image_rect: Where the image lands inside frame (aspect preserved)
        caption_top: Top of the caption line
    """

    block: PhotoBlock
    frame: Rect
    image_rect: Rect
    caption_top: float


@dataclass(frozen=True)
class PagePlan:
    """
    Complete layout plan for a single page.

    Attributes:
        index: Page number (0-indexed)
        placements: Photo blocks on this page, in position order
        has_title: True only for the first page
    """

    index: int
    placements: Tuple[BlockPlacement, ...]
    has_title: bool = False

    @property
    def regions(self) -> Tuple[PageRegion, ...]:
        """Regions this page carries, in drawing order."""
        if self.has_title:
            return (PageRegion.HEADER, PageRegion.TITLE, PageRegion.CONTENT, PageRegion.FOOTER)
        return (PageRegion.HEADER, PageRegion.CONTENT, PageRegion.FOOTER)

    @property
    def placement_count(self) -> int:
        return len(self.placements)

    @property
    def photo_ids(self) -> Tuple[str, ...]:
        return tuple(p.block.photo_id for p in self.placements)


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output with diagnostics.

    Example:
        >>> result.page_count
        3
        >>> [p.placement_count for p in result.pages]
        [2, 2, 1]
    """

    pages: Tuple[PagePlan, ...]
    warnings: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def total_blocks(self) -> int:
        return sum(p.placement_count for p in self.pages)
