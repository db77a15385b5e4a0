"""
Module: images.importer

Purpose:
    Import path from raw files to PhotoEntities: validate (size,
    declared type, magic bytes), convert HEIC, compress once, then append
    to a collection. Batch imports process files concurrently and report
    per-item outcomes; one bad file never aborts its siblings.

Key Classes:
    - ImportSource: Raw file bytes plus declared name/type
    - ImportOutcome: Result for one source
    - ImportReport: Results for a batch
    - PhotoImporter: Runs the import pipeline

Dependencies:
    - concurrent.futures: Parallel decode/compress
    - images.transform: compress_once
    - images.heic: HeicConverter
    - core.validation: require_import_file

Used By:
    - cli: import command
"""

from __future__ import annotations

import logging
import mimetypes
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional

from photo_report.core.errors import DecodeError, FileTooLargeError, UnsupportedFileError
from photo_report.core.models import PhotoEntity
from photo_report.core.validation import HEIC, MAX_IMPORT_BYTES, require_import_file

from .heic import HeicConverter
from .transform import (
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    IMPORT_QUALITY,
    ProcessedImage,
    compress_once,
)

if TYPE_CHECKING:
    from photo_report.collection.positioned import PhotoCollection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportSource:
    """
    A candidate file for import (immutable).

    Attributes:
        name: File name (used for extension checks and reporting)
        data: Raw file bytes
        mime_type: Declared MIME type, if known
        size: Size of the file on disk when data holds only a prefix
    """

    name: str
    data: bytes = field(repr=False)
    mime_type: Optional[str] = None
    size: Optional[int] = None

    @classmethod
    def from_path(cls, path: Path) -> "ImportSource":
        """
        Read a file from disk.

        Files larger than the import limit are not read in full; the
        first bytes beyond the limit are enough for rejection.
        """
        with open(path, "rb") as f:
            data = f.read(MAX_IMPORT_BYTES + 1)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, data=data, mime_type=mime_type, size=path.stat().st_size)


@dataclass(frozen=True)
class ImportOutcome:
    """
    Result of importing one source.

    Attributes:
        name: Source name
        ok: True if the photo was added
        photo_id: Id of the new PhotoEntity when ok
        error: Reason for failure when not ok
    """

    name: str
    ok: bool
    photo_id: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ImportReport:
    """Per-item results of a batch import."""

    outcomes: tuple[ImportOutcome, ...]

    @property
    def succeeded(self) -> List[ImportOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[ImportOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def all_ok(self) -> bool:
        return not self.failed


class PhotoImporter:
    """
    Validate, convert and compress files, then append them to a collection.

    Example:
        >>> importer = PhotoImporter()
        >>> report = importer.import_into(collection, [ImportSource.from_path(p)])
        >>> report.all_ok
        True
    """

    def __init__(
        self,
        heic_converter: Optional[HeicConverter] = None,
        *,
        max_width: int = DEFAULT_MAX_WIDTH,
        max_height: int = DEFAULT_MAX_HEIGHT,
        quality: float = IMPORT_QUALITY,
        max_workers: int = 4,
    ) -> None:
        self._heic = heic_converter or HeicConverter()
        self._max_width = max_width
        self._max_height = max_height
        self._quality = quality
        self._max_workers = max(1, max_workers)

    def prepare(self, source: ImportSource) -> ProcessedImage:
        """
        Validate and compress a single source.

        Raises:
            FileTooLargeError: Source exceeds 10 MiB
            UnsupportedFileError: Unsupported type or unrecognised content
            DecodeError: Content is corrupt
        """
        result = require_import_file(
            source.data, source.name, source.mime_type, source.size
        )
        if result.warning:
            logger.warning(result.warning)

        data = source.data
        if result.value == HEIC:
            data = self._heic.convert(data, source.name)

        processed = compress_once(data, self._max_width, self._max_height, self._quality)
        logger.debug(
            f"Prepared {source.name}: {processed.width}x{processed.height}, "
            f"{len(processed.data)} bytes"
        )
        return processed

    def import_one(self, collection: "PhotoCollection", source: ImportSource) -> PhotoEntity:
        """Prepare a single source and append it to collection."""
        processed = self.prepare(source)
        return collection.add(processed.data, processed.width, processed.height)

    def import_into(
        self,
        collection: "PhotoCollection",
        sources: Iterable[ImportSource],
    ) -> ImportReport:
        """
        Import a batch of sources.

        Sources are prepared concurrently; successful ones are appended in
        input order with a single batched store write. Validation and
        decode failures are reported per item.
        """
        sources = list(sources)
        if not sources:
            return ImportReport(outcomes=())

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [executor.submit(self.prepare, s) for s in sources]

        prepared: List[Optional[ProcessedImage]] = []
        errors: List[Optional[str]] = []
        for source, future in zip(sources, futures):
            try:
                prepared.append(future.result())
                errors.append(None)
            except (UnsupportedFileError, FileTooLargeError, DecodeError) as e:
                logger.warning(f"Import failed for {source.name}: {e}")
                prepared.append(None)
                errors.append(str(e))

        added = collection.add_many(
            [(p.data, p.width, p.height) for p in prepared if p is not None]
        )
        added_iter = iter(added)

        outcomes = []
        for source, processed, error in zip(sources, prepared, errors):
            if processed is None:
                outcomes.append(ImportOutcome(name=source.name, ok=False, error=error))
            else:
                entity = next(added_iter)
                outcomes.append(ImportOutcome(name=source.name, ok=True, photo_id=entity.id))

        report = ImportReport(outcomes=tuple(outcomes))
        logger.info(
            f"Imported {len(report.succeeded)}/{len(sources)} photos "
            f"({len(report.failed)} failed)"
        )
        return report
