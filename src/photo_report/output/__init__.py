"""
Module: output

Purpose:
    PDF rendering and document delivery.
    Converts a LayoutResult to PDF bytes using ReportLab and hands the
    result to a DocumentSink.

Key Functions:
    - render_to_pdf(): Render layout to PDF bytes

Key Classes:
    - PageChrome: Header/title/footer content
    - AssetProvider / StaticAssetProvider: Logo and static texts
    - DocumentSink / FileSink / CallbackSink: Delivery targets

Dependencies:
    - reportlab: PDF generation
"""

from .assets import AssetProvider, HeaderLine, StaticAssetProvider
from .renderer import PageChrome, render_to_pdf
from .sinks import CallbackSink, DocumentSink, FileSink

__all__ = [
    "AssetProvider",
    "HeaderLine",
    "StaticAssetProvider",
    "PageChrome",
    "render_to_pdf",
    "CallbackSink",
    "DocumentSink",
    "FileSink",
]
