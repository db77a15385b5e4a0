"""
Module: output.renderer

Purpose:
    Render a LayoutResult to PDF bytes using ReportLab.
    Each PagePlan becomes one PDF page: header band with logo, title on
    the first page, photo blocks, footer.

Key Functions:
    - render_to_pdf(): Main rendering function

Dependencies:
    - reportlab: PDF generation
    - layout.models: LayoutResult, PagePlan, BlockPlacement
    - output.assets: HeaderLine

Used By:
    - controller: Export pipeline
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from photo_report.layout.config import LayoutConfig
from photo_report.layout.models import BlockPlacement, LayoutResult, PagePlan, Rect

from .assets import HeaderLine

logger = logging.getLogger(__name__)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

TITLE_FONT_SIZE = 20
HEADER_BOLD_FONT_SIZE = 14
HEADER_FONT_SIZE = 12
CAPTION_FONT_SIZE = 12
CAPTION_MIN_FONT_SIZE = 7
CAPTION_WIDTH_RATIO = 0.85
FOOTER_FONT_SIZE = 10
FOOTER_LEADING = 12
LOGO_TEXT_GAP = 15


@dataclass(frozen=True)
class PageChrome:
    """
    Everything drawn outside the photo blocks (immutable).

    Attributes:
        header_lines: Header text lines, drawn on every page
        title: Title, drawn on the first page only
        footer_lines: Footer lines, drawn on every page
        logo: Encoded logo image, or None
        document_title: PDF metadata title
    """

    header_lines: Sequence[HeaderLine]
    title: str
    footer_lines: Sequence[str]
    logo: Optional[bytes] = field(default=None, repr=False)
    document_title: str = ""


def render_to_pdf(
    layout: LayoutResult,
    config: LayoutConfig,
    chrome: PageChrome,
) -> bytes:
    """
    Render layout result to PDF bytes.

    Args:
        layout: Layout result from paginator
        config: Layout configuration used for pagination
        chrome: Header/title/footer content

    Returns:
        Complete PDF document

    Raises:
        ValueError: If layout has no pages
        OSError: If an image cannot be read by ReportLab

    Example:
        >>> pdf = render_to_pdf(layout, LayoutConfig(), chrome)
        >>> pdf[:5]
        b'%PDF-'
    """
    if layout.page_count == 0:
        raise ValueError("Cannot render a layout with no pages")

    buf = io.BytesIO()
    c = canvas.Canvas(
        buf,
        pagesize=(config.page_width, config.page_height),
        pageCompression=1,
    )
    if chrome.document_title:
        c.setTitle(chrome.document_title)

    logo_reader = _bytes_to_reader(chrome.logo) if chrome.logo else None

    for page in layout.pages:
        _render_page(c, page, config, chrome, logo_reader)
        c.showPage()

    c.save()
    data = buf.getvalue()
    logger.info(f"Rendered {layout.page_count} pages ({len(data)} bytes)")
    return data


def _render_page(
    c: canvas.Canvas,
    page: PagePlan,
    config: LayoutConfig,
    chrome: PageChrome,
    logo_reader: Optional[ImageReader],
) -> None:
    """Render a single page: header, optional title, blocks, footer."""
    _draw_header(c, config, chrome.header_lines, logo_reader)
    if page.has_title:
        _draw_title(c, config, chrome.title)
    for placement in page.placements:
        _draw_block(c, config, placement)
    _draw_footer(c, config, chrome.footer_lines)


def _draw_header(
    c: canvas.Canvas,
    config: LayoutConfig,
    lines: Sequence[HeaderLine],
    logo_reader: Optional[ImageReader],
) -> None:
    """
    Draw logo box on the left and header lines to its right.

    Line spacing shrinks when there are more lines than fit in the
    header band at their natural leading.
    """
    top = config.padding
    if logo_reader is not None:
        logo_rect = Rect(config.padding, top, config.logo_width, config.logo_height)
        c.drawImage(
            logo_reader,
            logo_rect.x,
            _transform_y(config.page_height, logo_rect.top, logo_rect.height),
            width=logo_rect.width,
            height=logo_rect.height,
            preserveAspectRatio=True,
            anchor="c",
            mask="auto",
        )

    if not lines:
        return

    text_x = config.padding + config.logo_width + LOGO_TEXT_GAP
    natural = sum(
        (HEADER_BOLD_FONT_SIZE if line.bold else HEADER_FONT_SIZE) + 4 for line in lines
    )
    squeeze = min(1.0, config.header_height / natural)

    c.saveState()
    c.setFillColorRGB(0, 0, 0)
    y_from_top = top
    for line in lines:
        size = HEADER_BOLD_FONT_SIZE if line.bold else HEADER_FONT_SIZE
        leading = (size + 4) * squeeze
        y_from_top += leading
        c.setFont(FONT_BOLD if line.bold else FONT, size)
        c.drawString(text_x, config.page_height - y_from_top, line.text)
    c.restoreState()


def _draw_title(c: canvas.Canvas, config: LayoutConfig, title: str) -> None:
    """Draw the centred first-page title just below the header band."""
    baseline_from_top = config.content_top + TITLE_FONT_SIZE * 0.8
    c.saveState()
    c.setFont(FONT_BOLD, TITLE_FONT_SIZE)
    c.drawCentredString(config.page_width / 2, config.page_height - baseline_from_top, title)
    c.restoreState()


def _draw_block(c: canvas.Canvas, config: LayoutConfig, placement: BlockPlacement) -> None:
    """
    Draw a photo fitted in its frame and its caption centred below.

    Captions are drawn verbatim; a caption wider than the caption area
    is drawn at a smaller font size instead of being cut.
    """
    rect = placement.image_rect
    c.drawImage(
        _bytes_to_reader(placement.block.image),
        rect.x,
        _transform_y(config.page_height, rect.top, rect.height),
        width=rect.width,
        height=rect.height,
    )

    text = placement.block.caption_text
    max_width = config.content_width * CAPTION_WIDTH_RATIO
    size = _fit_font_size(c, text, FONT, CAPTION_FONT_SIZE, max_width)

    c.saveState()
    c.setFont(FONT, size)
    baseline_from_top = placement.caption_top + size
    c.drawCentredString(config.page_width / 2, config.page_height - baseline_from_top, text)
    c.restoreState()


def _draw_footer(c: canvas.Canvas, config: LayoutConfig, lines: Sequence[str]) -> None:
    """Draw centred footer lines; the last line sits footer_offset above the bottom."""
    c.saveState()
    c.setFont(FONT, FOOTER_FONT_SIZE)
    for i, line in enumerate(reversed(list(lines))):
        y_pt = config.footer_offset + i * FOOTER_LEADING
        c.drawCentredString(config.page_width / 2, y_pt, line)
    c.restoreState()


def _fit_font_size(
    c: canvas.Canvas,
    text: str,
    font: str,
    size: float,
    max_width: float,
) -> float:
    """Largest size <= size (down to CAPTION_MIN_FONT_SIZE) at which text fits."""
    width = c.stringWidth(text, font, size)
    if width <= max_width:
        return size
    return max(CAPTION_MIN_FONT_SIZE, size * max_width / width)


def _bytes_to_reader(data: bytes) -> ImageReader:
    """
    Wrap encoded image bytes for ReportLab.

    JPEG bytes are embedded as-is, without re-encoding.
    """
    return ImageReader(io.BytesIO(data))


def _transform_y(page_height_pt: float, top_pt: float, height_pt: float) -> float:
    """
    Convert a top-down Y coordinate to ReportLab's bottom-up Y.

    Args:
        page_height_pt: Page height in points
        top_pt: Top of the element, measured from the page top
        height_pt: Height of the element

    Returns:
        Y of the element's bottom edge, measured from the page bottom
    """
    return page_height_pt - top_pt - height_pt
