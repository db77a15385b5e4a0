"""
Module: layout

Purpose:
    Page layout for the photo report.
    Converts an ordered photo sequence into positioned page plans.

Key Functions:
    - paginate(): Arrange photo blocks onto pages

Key Classes:
    - LayoutConfig: Configuration for page layout
    - PhotoBlock: Renderable photo + caption
    - PagePlan: Single page layout plan

Used By:
    - controller: Export pipeline
"""

from .config import LayoutConfig
from .models import (
    CAPTION_PLACEHOLDER,
    BlockPlacement,
    LayoutResult,
    PagePlan,
    PageRegion,
    PhotoBlock,
    Rect,
)
from .paginator import fit_within, paginate

__all__ = [
    # Config
    "LayoutConfig",
    # Models
    "CAPTION_PLACEHOLDER",
    "BlockPlacement",
    "LayoutResult",
    "PagePlan",
    "PageRegion",
    "PhotoBlock",
    "Rect",
    # Functions
    "fit_within",
    "paginate",
]
