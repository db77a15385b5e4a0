"""
Module: layout.config

Purpose:
    Configuration for the page layout engine. Defines page dimensions,
    region heights and the photo block geometry, all in PDF points.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - reportlab.lib.pagesizes: A4 dimensions

Used By:
    - layout.paginator: Page arrangement
    - output.renderer: Drawing coordinates
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.pagesizes import A4

A4_WIDTH_PT, A4_HEIGHT_PT = A4
DEFAULT_PHOTOS_PER_PAGE = 2


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    Page regions top to bottom: header band, title (first page only),
    content with up to photos_per_page blocks, footer.

    Attributes:
        page_width: Page width in points
        page_height: Page height in points
        padding: Page padding on every side
        header_height: Height of the header band
        header_spacing: Gap below the header band
        logo_width: Logo box width
        logo_height: Logo box height
        title_height: Height reserved for the title on page 0
        photos_per_page: Maximum photo blocks per page (K)
        photo_width_ratio: Photo box width as a fraction of content width
        photo_box_height: Photo box height
        caption_gap: Gap between photo box and caption baseline area
        caption_height: Height reserved for the caption line
        block_spacing: Gap after each photo block
        footer_height: Height reserved for the footer
        footer_offset: Distance of the footer's last line from page bottom

    Example:
        >>> config = LayoutConfig()
        >>> round(config.content_width, 2)
        555.28
    """

    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT
    padding: float = 20

    # Header
    header_height: float = 100
    header_spacing: float = 20
    logo_width: float = 75
    logo_height: float = 100

    # Title
    title_height: float = 25

    # Content
    photos_per_page: int = DEFAULT_PHOTOS_PER_PAGE
    photo_width_ratio: float = 0.72
    photo_box_height: float = 280
    caption_gap: float = 2
    caption_height: float = 14
    block_spacing: float = 15

    # Footer
    footer_height: float = 30
    footer_offset: float = 10

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValueError(f"Page size must be positive: {self.page_width}x{self.page_height}")
        if self.photos_per_page < 1:
            raise ValueError(f"photos_per_page must be >= 1: {self.photos_per_page}")
        if not 0 < self.photo_width_ratio <= 1:
            raise ValueError(f"photo_width_ratio must be in (0, 1]: {self.photo_width_ratio}")
        if self.content_width <= 0:
            raise ValueError("Padding exceeds page width")
        needed = self.photos_per_page * self.block_height
        if needed > self.first_page_content_height:
            raise ValueError(
                f"{self.photos_per_page} photo blocks need {needed:.0f}pt, "
                f"only {self.first_page_content_height:.0f}pt available"
            )

    @property
    def content_width(self) -> float:
        """Width inside the page padding."""
        return self.page_width - 2 * self.padding

    @property
    def photo_box_width(self) -> float:
        return self.content_width * self.photo_width_ratio

    @property
    def block_height(self) -> float:
        """Vertical space taken by one photo block."""
        return self.photo_box_height + self.caption_gap + self.caption_height + self.block_spacing

    @property
    def content_top(self) -> float:
        """Top of the content region (from page top) on pages after the first."""
        return self.padding + self.header_height + self.header_spacing

    @property
    def content_bottom(self) -> float:
        """Bottom of the content region (from page top)."""
        return self.page_height - self.padding - self.footer_height

    @property
    def first_page_content_height(self) -> float:
        return self.content_bottom - self.content_top - self.title_height
