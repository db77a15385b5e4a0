"""
Module: output.sinks

Purpose:
    Destinations for a finished document. The export pipeline hands over
    the PDF bytes and a suggested filename; what happens next (save,
    share, upload) is the sink's business.

Key Classes:
    - DocumentSink: Abstract sink interface
    - FileSink: Write into a directory without overwriting
    - CallbackSink: Forward to a callable (embedding, tests)

Used By:
    - controller: Final export step
    - cli: export command
"""

from __future__ import annotations

import logging
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DocumentSink(ABC):
    """Accepts a finished document."""

    @abstractmethod
    def deliver(self, document: bytes, filename: str) -> str:
        """
        Deliver document under the suggested filename.

        Returns:
            Description of where the document went (path, URL, ...)
        """


class FileSink(DocumentSink):
    """
    Write documents into a directory.

    An existing file is never overwritten; a numbered suffix is added
    instead ("name (1).pdf").

    Example:
        >>> FileSink(Path("out")).deliver(pdf, "AB1234-25_relatorio-fotografico.pdf")
        'out/AB1234-25_relatorio-fotografico.pdf'
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def deliver(self, document: bytes, filename: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = _unique_path(self.directory / filename)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            suffix=target.suffix,
            dir=target.parent,
            delete=False,
        ) as f:
            f.write(document)
            temp_path = Path(f.name)
        temp_path.replace(target)
        logger.info(f"Wrote {len(document)} bytes to {target}")
        return str(target)


class CallbackSink(DocumentSink):
    """Forward documents to a callable returning a location string."""

    def __init__(self, callback: Callable[[bytes, str], Optional[str]]) -> None:
        self._callback = callback

    def deliver(self, document: bytes, filename: str) -> str:
        location = self._callback(document, filename)
        return location if location is not None else filename


def _unique_path(path: Path) -> Path:
    """Return path, or the first free 'stem (n)suffix' variant."""
    if not path.exists():
        return path
    counter = 1
    while True:
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1
