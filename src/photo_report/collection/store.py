"""
Module: collection.store

Purpose:
    Persistent key-value store for PhotoEntities, keyed by id. The
    collection only assumes "last write wins, reads see prior writes".

Key Classes:
    - PhotoStore: Abstract store interface
    - InMemoryPhotoStore: Dict-backed store (tests, embedding)
    - DirectoryPhotoStore: One directory per photo on disk

Dependencies:
    - json, tempfile (std)

Used By:
    - collection.positioned: PhotoCollection persistence
    - cli: Working directory between invocations
"""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, List

from photo_report.core.models import PhotoEntity

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.json"
ORIGINAL_FILENAME = "original.jpg"


class PhotoStore(ABC):
    """
    Abstract persistent store for photos.

    put_many() exists so reindexing a collection costs one round trip
    instead of one per displaced photo. The default implementation loops
    over put(); stores with a native batch write should override it.
    """

    @abstractmethod
    def get_all(self) -> List[PhotoEntity]:
        """Return every stored photo, in no particular order."""

    @abstractmethod
    def put(self, entity: PhotoEntity) -> None:
        """Insert or replace a photo."""

    def put_many(self, entities: Iterable[PhotoEntity]) -> None:
        """Insert or replace several photos."""
        for entity in entities:
            self.put(entity)

    @abstractmethod
    def delete(self, photo_id: str) -> None:
        """Delete a photo; unknown ids are ignored."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every photo."""


class InMemoryPhotoStore(PhotoStore):
    """
    Dict-backed store.

    Counts write calls so callers (and tests) can check batching.

    Example:
        >>> store = InMemoryPhotoStore()
        >>> store.put(photo)
        >>> len(store.get_all())
        1
    """

    def __init__(self) -> None:
        self._data: Dict[str, PhotoEntity] = {}
        self._lock = Lock()
        self.write_calls = 0

    def get_all(self) -> List[PhotoEntity]:
        with self._lock:
            return list(self._data.values())

    def put(self, entity: PhotoEntity) -> None:
        with self._lock:
            self._data[entity.id] = entity
            self.write_calls += 1

    def put_many(self, entities: Iterable[PhotoEntity]) -> None:
        with self._lock:
            for entity in entities:
                self._data[entity.id] = entity
            self.write_calls += 1

    def delete(self, photo_id: str) -> None:
        with self._lock:
            self._data.pop(photo_id, None)
            self.write_calls += 1

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self.write_calls += 1


class DirectoryPhotoStore(PhotoStore):
    """
    Store each photo as <root>/<id>/original.jpg + metadata.json.

    The original image is written once (it never changes); metadata is
    rewritten on every put. All writes go through a temp file and
    replace() so a crash never leaves a half-written file.

    Attributes:
        root: Store directory
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def get_all(self) -> List[PhotoEntity]:
        """
        Load every photo directory under root.

        Directories with missing or malformed files are skipped with a
        warning rather than failing the whole load.
        """
        entities = []
        for photo_dir in sorted(p for p in self.root.iterdir() if p.is_dir()):
            metadata_path = photo_dir / METADATA_FILENAME
            image_path = photo_dir / ORIGINAL_FILENAME
            try:
                data = json.loads(metadata_path.read_text(encoding="utf-8"))
                image = image_path.read_bytes()
                entities.append(PhotoEntity.from_dict(data, image))
            except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
                logger.warning(f"Skipping unreadable photo entry {photo_dir.name}: {e}")
        logger.debug(f"Loaded {len(entities)} photos from {self.root}")
        return entities

    def put(self, entity: PhotoEntity) -> None:
        photo_dir = self.root / entity.id
        photo_dir.mkdir(parents=True, exist_ok=True)
        image_path = photo_dir / ORIGINAL_FILENAME
        if not image_path.exists():
            _atomic_write_bytes(entity.original_image, image_path)
        _atomic_write_json(entity.to_dict(), photo_dir / METADATA_FILENAME)

    def delete(self, photo_id: str) -> None:
        photo_dir = self.root / photo_id
        if photo_dir.is_dir():
            shutil.rmtree(photo_dir)

    def clear(self) -> None:
        for photo_dir in self.root.iterdir():
            if photo_dir.is_dir():
                shutil.rmtree(photo_dir)
        logger.info(f"Cleared photo store {self.root}")


def _atomic_write_bytes(data: bytes, path: Path) -> None:
    """Write bytes atomically using temp file."""
    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=path.suffix,
        dir=path.parent,
        delete=False,
    ) as f:
        f.write(data)
        temp_path = Path(f.name)
    temp_path.replace(path)


def _atomic_write_json(data: Dict[str, Any], path: Path) -> None:
    """Write JSON atomically using temp file."""
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".json",
        dir=path.parent,
        delete=False,
        encoding="utf-8",
    ) as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        temp_path = Path(f.name)
    temp_path.replace(path)
