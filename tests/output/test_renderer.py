"""
Tests for output.renderer

Test Coverage:
- render_to_pdf(): Valid PDF bytes, one page per PagePlan
- Header/title/footer drawing
- Caption font fitting
"""
import io

import pytest
from reportlab.pdfgen import canvas

from photo_report.layout import LayoutConfig, LayoutResult, PhotoBlock, paginate
from photo_report.output.assets import HeaderLine, StaticAssetProvider
from photo_report.output.renderer import (
    CAPTION_MIN_FONT_SIZE,
    PageChrome,
    _fit_font_size,
    _transform_y,
    render_to_pdf,
)


@pytest.fixture
def chrome() -> PageChrome:
    assets = StaticAssetProvider()
    return PageChrome(
        header_lines=assets.header_lines("AB1234/25", "1", "2"),
        title=assets.title(),
        footer_lines=assets.footer_lines(),
        document_title="Relatório Fotográfico AB1234/25",
    )


@pytest.fixture
def layout(jpeg_bytes) -> LayoutResult:
    blocks = [
        PhotoBlock(photo_id=f"p{i}", position=i, caption=f"Foto {i}", image=jpeg_bytes, width=320, height=240)
        for i in range(1, 4)
    ]
    return paginate(blocks, LayoutConfig())


def count_pages(pdf: bytes) -> int:
    return pdf.count(b"/Type /Page") - pdf.count(b"/Type /Pages")


class TestRenderToPdf:

    def test_returns_pdf_bytes(self, layout, chrome):
        pdf = render_to_pdf(layout, LayoutConfig(), chrome)
        assert pdf.startswith(b"%PDF-")
        assert pdf.rstrip().endswith(b"%%EOF")

    def test_one_pdf_page_per_plan(self, layout, chrome):
        pdf = render_to_pdf(layout, LayoutConfig(), chrome)
        assert count_pages(pdf) == layout.page_count == 2

    def test_with_logo(self, layout, chrome, png_bytes):
        with_logo = PageChrome(
            header_lines=chrome.header_lines,
            title=chrome.title,
            footer_lines=chrome.footer_lines,
            logo=png_bytes,
        )
        assert render_to_pdf(layout, LayoutConfig(), with_logo).startswith(b"%PDF-")

    def test_empty_layout_rejected(self, chrome):
        with pytest.raises(ValueError):
            render_to_pdf(LayoutResult(pages=()), LayoutConfig(), chrome)

    def test_corrupt_image_raises_os_error(self, chrome):
        block = PhotoBlock(photo_id="p1", position=1, caption="", image=b"nope", width=10, height=10)
        layout = paginate([block], LayoutConfig())
        with pytest.raises(OSError):
            render_to_pdf(layout, LayoutConfig(), chrome)


class TestHelpers:

    def test_transform_y(self):
        assert _transform_y(800, 100, 50) == 650

    def test_short_caption_keeps_size(self):
        c = canvas.Canvas(io.BytesIO())
        assert _fit_font_size(c, "Sala", "Helvetica", 12, 400) == 12

    def test_long_caption_shrinks(self):
        c = canvas.Canvas(io.BytesIO())
        text = "W" * 78
        size = _fit_font_size(c, text, "Helvetica", 12, 400)
        assert CAPTION_MIN_FONT_SIZE <= size < 12

    def test_header_line_defaults_to_regular(self):
        assert HeaderLine("x").bold is False
