"""
Module: controller

Purpose:
    Orchestrate the complete export pipeline.
    Snapshot → Resolve display images → Paginate → Render → Deliver

Key Classes:
    - DocumentAssembler: Runs the export pipeline
    - ExportResult: Complete export result

Key Functions:
    - confirmation_summary(): Pre-export summary text for a UI prompt

Dependencies:
    - concurrent.futures: Parallel display-image resolution
    - images.rotation: RotationModel
    - layout: Pagination
    - output: PDF rendering, assets, sinks

Used By:
    - cli: export command
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from photo_report.collection.positioned import PhotoCollection
from photo_report.config import ReportConfig
from photo_report.core.errors import EmptyDocumentError, ExportFailure, PhotoReportError
from photo_report.core.models import PhotoEntity, pdf_filename
from photo_report.images.rotation import RotationModel
from photo_report.images import transform
from photo_report.layout import LayoutConfig, LayoutResult, PhotoBlock, paginate
from photo_report.output.assets import AssetProvider, StaticAssetProvider
from photo_report.output.renderer import PageChrome, render_to_pdf
from photo_report.output.sinks import DocumentSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """
    Complete export result (immutable).

    Attributes:
        filename: Suggested document filename
        document: PDF bytes
        page_count: Number of pages generated
        photo_count: Number of photos in the document
        elapsed: Export duration in seconds
        metadata: Export metadata dictionary
        location: Where the sink put the document, if a sink was used
        warnings: Any warnings during layout

    Example:
        >>> result = assembler.export(collection, config)
        >>> print(f"{result.filename}: {result.page_count} pages")
    """

    filename: str
    document: bytes = field(repr=False)
    page_count: int
    photo_count: int
    elapsed: float
    metadata: Dict[str, Any]
    location: Optional[str] = None
    warnings: tuple[str, ...] = ()


class DocumentAssembler:
    """
    Export a photo collection as a paginated PDF.

    An export either completes or fails as a whole with ExportFailure;
    no partial document ever reaches the sink. There are no internal
    retries; a failed export is retried by calling export() again.

    Example:
        >>> assembler = DocumentAssembler(sink=FileSink(Path("out")))
        >>> result = assembler.export(collection, config)
    """

    def __init__(
        self,
        rotation_model: Optional[RotationModel] = None,
        assets: Optional[AssetProvider] = None,
        sink: Optional[DocumentSink] = None,
        *,
        max_workers: int = 4,
    ) -> None:
        self.rotation_model = rotation_model or RotationModel()
        self.assets = assets or StaticAssetProvider()
        self.sink = sink
        self.max_workers = max(1, max_workers)

    @classmethod
    def from_config(
        cls,
        config: ReportConfig,
        sink: Optional[DocumentSink] = None,
        assets: Optional[AssetProvider] = None,
    ) -> "DocumentAssembler":
        """Build an assembler using config's quality, worker and logo settings."""
        return cls(
            rotation_model=RotationModel(export_quality=config.export_quality),
            assets=assets or StaticAssetProvider(logo_path=config.logo_path),
            sink=sink,
            max_workers=config.max_workers,
        )

    def export(self, collection: PhotoCollection, config: ReportConfig) -> ExportResult:
        """
        Export collection to a PDF document.

        Pipeline:
        1. Check preconditions (at least one photo)
        2. Snapshot the position-ordered photos
        3. Resolve display images concurrently, re-joined in position order
        4. Paginate into pages of config.photos_per_page
        5. Render to PDF bytes
        6. Deliver to the sink (if any)

        Raises:
            EmptyDocumentError: If the collection has no photos
            ExportFailure: If resolving, rendering or delivery fails
        """
        start_time = time.perf_counter()
        photos = collection.snapshot()
        if not photos:
            raise EmptyDocumentError("Add at least one photo before generating the report")

        logger.info(f"Starting export for {config.case_id} with {len(photos)} photos")

        blocks = self.resolve_blocks(photos)

        layout_config = LayoutConfig(photos_per_page=config.photos_per_page)
        layout = paginate(blocks, layout_config)
        for warning in layout.warnings:
            logger.warning(warning)

        try:
            chrome = self._build_chrome(config)
            document = render_to_pdf(layout, layout_config, chrome)
        except (OSError, ValueError) as e:
            raise ExportFailure(f"Failed to render document: {e}") from e

        filename = pdf_filename(config.case_id)
        location = None
        if self.sink is not None:
            try:
                location = self.sink.deliver(document, filename)
            except Exception as e:
                raise ExportFailure(f"Failed to deliver {filename}: {e}") from e

        elapsed = time.perf_counter() - start_time
        logger.info(f"Export completed in {elapsed:.2f}s: {layout.page_count} pages")

        return ExportResult(
            filename=filename,
            document=document,
            page_count=layout.page_count,
            photo_count=len(photos),
            elapsed=elapsed,
            metadata=_build_metadata(config, layout, filename),
            location=location,
            warnings=tuple(layout.warnings),
        )

    def resolve_blocks(self, photos: Sequence[PhotoEntity]) -> List[PhotoBlock]:
        """
        Resolve display images for photos and wrap them as PhotoBlocks.

        Each resolution is independent and pure, so they run in a thread
        pool. Results come back in input order. Any failure aborts the
        whole batch.

        Raises:
            ExportFailure: If any photo cannot be resolved
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self._resolve_one, photo) for photo in photos]

        blocks = []
        for photo, future in zip(photos, futures):
            try:
                blocks.append(future.result())
            except PhotoReportError as e:
                raise ExportFailure(
                    f"Failed to prepare photo {photo.position} ({photo.id}): {e}"
                ) from e
        logger.debug(f"Resolved {len(blocks)} display images")
        return blocks

    def _resolve_one(self, photo: PhotoEntity) -> PhotoBlock:
        image = self.rotation_model.resolve_display_image(photo)
        if photo.rotation == 0:
            # Original bytes are used as-is; confirm they still decode
            transform.decode(image)
        width, height = photo.display_size
        return PhotoBlock(
            photo_id=photo.id,
            position=photo.position,
            caption=photo.caption,
            image=image,
            width=width,
            height=height,
        )

    def _build_chrome(self, config: ReportConfig) -> PageChrome:
        return PageChrome(
            header_lines=self.assets.header_lines(config.case_id, config.version, config.group),
            title=self.assets.title(),
            footer_lines=self.assets.footer_lines(),
            logo=self.assets.logo(),
            document_title=f"{self.assets.title()} {config.case_id}",
        )


def confirmation_summary(collection: PhotoCollection, config: ReportConfig) -> str:
    """
    Text a presentation layer can show before exporting.

    Example:
        >>> print(confirmation_summary(collection, config))
        Confirma a geração do relatório em PDF?
        <BLANKLINE>
        BO: AB1234/25
        Total de fotos: 5
    """
    return (
        "Confirma a geração do relatório em PDF?\n\n"
        f"BO: {config.case_id}\n"
        f"Total de fotos: {len(collection)}"
    )


def _build_metadata(
    config: ReportConfig,
    layout: LayoutResult,
    filename: str,
) -> Dict[str, Any]:
    """
    Build metadata dictionary for an exported report.

    Contains the report identity, page count and a manifest of which
    photos landed on which page.
    """
    return {
        "generated_at": datetime.now().isoformat(),
        "filename": filename,
        "case_id": config.case_id,
        "version": config.version,
        "group": config.group,
        "photos_per_page": config.photos_per_page,
        "photo_count": layout.total_blocks,
        "page_count": layout.page_count,
        "manifest": [
            {
                "page": page.index + 1,  # 1-indexed for humans
                "photo_ids": list(page.photo_ids),
                "has_title": page.has_title,
            }
            for page in layout.pages
        ],
    }
