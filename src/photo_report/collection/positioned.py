"""
Module: collection.positioned

Purpose:
    The ordered photo collection. Keeps positions dense and unique
    (exactly 1..N) under insert, move and remove, and persists every
    change through an injected PhotoStore.

Key Classes:
    - PhotoCollection: Explicit collection object passed to every operation

Algorithm:
    Shift-range reindexing (never swap):
    - move(id, target) with target < old: positions [target, old-1] shift +1
    - move(id, target) with target > old: positions [old+1, target] shift -1
    - remove(id): positions > removed shift -1
    Only displaced photos are rewritten, in one batched store call.

Dependencies:
    - threading (std): Per-collection mutation lock
    - collection.store: PhotoStore
    - images.rotation: RotationModel

Used By:
    - images.importer: add_many()
    - controller: snapshot() at export
    - cli: All collection commands
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from photo_report.core.errors import NotFoundError, OutOfRangeError
from photo_report.core.models import PhotoEntity, normalize_angle
from photo_report.images.rotation import RotationModel

from .store import InMemoryPhotoStore, PhotoStore

logger = logging.getLogger(__name__)


class PhotoCollection:
    """
    Ordered, persisted set of photos with dense 1-based positions.

    All mutating methods hold the collection lock, so concurrent move()
    and remove() calls on one instance never interleave.

    Attributes:
        store: Backing PhotoStore
        rotation_model: Validates and applies rotation metadata

    Example:
        >>> collection = PhotoCollection(InMemoryPhotoStore())
        >>> a = collection.add(jpeg_a, 1600, 1200)
        >>> b = collection.add(jpeg_b, 1600, 1200)
        >>> collection.move(b.id, 1)
        >>> [p.id for p in collection]
        [b.id, a.id]
    """

    def __init__(
        self,
        store: Optional[PhotoStore] = None,
        rotation_model: Optional[RotationModel] = None,
    ) -> None:
        """
        Bind to store and load its current contents.

        Persisted positions that are not exactly 1..N (gaps, duplicates)
        are repaired by re-ranking in (position, created_at, id) order.
        """
        self.store = store if store is not None else InMemoryPhotoStore()
        self.rotation_model = rotation_model or RotationModel()
        self._lock = RLock()
        self._photos: Dict[str, PhotoEntity] = {}
        self._order: List[str] = []
        self._load()

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, photo_id: object) -> bool:
        return photo_id in self._photos

    def __iter__(self) -> Iterator[PhotoEntity]:
        """Iterate photos in position order over a snapshot."""
        return iter(self.snapshot())

    def list_photos(self) -> List[PhotoEntity]:
        """Photos in position order."""
        return list(self.snapshot())

    def snapshot(self) -> Tuple[PhotoEntity, ...]:
        """Immutable, position-ordered copy of the collection."""
        with self._lock:
            return tuple(self._photos[pid] for pid in self._order)

    def get(self, photo_id: str) -> PhotoEntity:
        """
        Return the photo with photo_id.

        Raises:
            NotFoundError: If the id is not in the collection
        """
        with self._lock:
            try:
                return self._photos[photo_id]
            except KeyError:
                raise NotFoundError(f"Photo not found: {photo_id}") from None

    def positions(self) -> List[int]:
        """Current positions in order (always 1..N)."""
        with self._lock:
            return [self._photos[pid].position for pid in self._order]

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def insert(self, entity: PhotoEntity) -> PhotoEntity:
        """
        Append entity at the tail (position = N + 1).

        Any position carried by entity is ignored; freed mid-sequence
        slots are never reused.
        """
        return self.insert_many([entity])[0]

    def insert_many(self, entities: Sequence[PhotoEntity]) -> List[PhotoEntity]:
        """Append entities at the tail in order, with one store write."""
        with self._lock:
            if len({e.id for e in entities}) != len(entities):
                raise ValueError("Duplicate photo ids within batch")
            start = len(self._order)
            placed = [e.with_position(start + i + 1) for i, e in enumerate(entities)]
            for entity in placed:
                if entity.id in self._photos:
                    raise ValueError(f"Duplicate photo id: {entity.id}")
            if not placed:
                return []
            self.store.put_many(placed)
            for entity in placed:
                self._photos[entity.id] = entity
                self._order.append(entity.id)
            logger.debug(f"Inserted {len(placed)} photos, collection size {len(self._order)}")
            return placed

    def add(self, image: bytes, width: int, height: int) -> PhotoEntity:
        """Create a photo from already-compressed image bytes and append it."""
        return self.insert(PhotoEntity.create(image, width, height))

    def add_many(self, images: Sequence[Tuple[bytes, int, int]]) -> List[PhotoEntity]:
        """Create and append several photos with one store write."""
        return self.insert_many([PhotoEntity.create(*item) for item in images])

    def move(self, photo_id: str, target: int) -> None:
        """
        Move a photo to target position, shifting the photos in between.

        No-op when target equals the current position.

        Raises:
            NotFoundError: If the id is not in the collection
            OutOfRangeError: If target is outside [1, N]
        """
        with self._lock:
            entity = self.get(photo_id)
            size = len(self._order)
            if isinstance(target, bool) or not isinstance(target, int) or not 1 <= target <= size:
                raise OutOfRangeError(f"Position must be in [1, {size}], got {target!r}")
            old = entity.position
            if target == old:
                return

            if target < old:
                displaced = self._order[target - 1:old - 1]
                delta = 1
            else:
                displaced = self._order[old:target]
                delta = -1

            updated = [
                self._photos[pid].with_position(self._photos[pid].position + delta)
                for pid in displaced
            ]
            updated.append(entity.with_position(target))
            self.store.put_many(updated)

            for item in updated:
                self._photos[item.id] = item
            self._order.pop(old - 1)
            self._order.insert(target - 1, photo_id)
            logger.debug(f"Moved photo {photo_id} {old} -> {target} ({len(displaced)} shifted)")

    def remove(self, photo_id: str) -> None:
        """
        Remove a photo and close the gap it leaves.

        Unknown ids are ignored, so remove() is idempotent. If shifting
        the later photos fails, the deleted photo and the old positions
        are written back before the error propagates, and the collection
        is left unchanged.
        """
        with self._lock:
            entity = self._photos.get(photo_id)
            if entity is None:
                logger.debug(f"Remove ignored, photo not found: {photo_id}")
                return
            index = entity.position - 1
            following = [self._photos[pid] for pid in self._order[index + 1:]]
            updated = [e.with_position(e.position - 1) for e in following]
            self.store.delete(photo_id)
            if updated:
                try:
                    self.store.put_many(updated)
                except Exception:
                    logger.error(f"Failed to shift photos after removing {photo_id}; restoring")
                    for original in [entity, *following]:
                        self.store.put(original)
                    raise

            del self._photos[photo_id]
            self._order.pop(index)
            for item in updated:
                self._photos[item.id] = item
            logger.debug(f"Removed photo {photo_id}, {len(updated)} shifted")

    def clear(self) -> None:
        """Remove every photo."""
        with self._lock:
            self.store.clear()
            self._photos = {}
            self._order = []
            logger.info("Cleared photo collection")

    def set_caption(self, photo_id: str, caption: Optional[str]) -> PhotoEntity:
        """
        Set a photo's caption, truncating to 78 characters.

        Raises:
            NotFoundError: If the id is not in the collection
        """
        with self._lock:
            entity = self.get(photo_id)
            updated = entity.with_caption(caption)
            if updated.caption == entity.caption:
                return entity
            return self._replace(updated)

    def set_rotation(self, photo_id: str, angle: int) -> PhotoEntity:
        """
        Set a photo's display rotation (metadata only).

        Raises:
            NotFoundError: If the id is not in the collection
            InvalidAngleError: If angle is not 0, 90, 180 or 270
        """
        with self._lock:
            entity = self.get(photo_id)
            updated = self.rotation_model.set_rotation(entity, angle)
            if updated is entity:
                return entity
            return self._replace(updated)

    def rotate_clockwise(self, photo_id: str) -> PhotoEntity:
        """Rotate display orientation by +90 degrees."""
        with self._lock:
            entity = self.get(photo_id)
            return self.set_rotation(photo_id, normalize_angle(entity.rotation + 90))

    def rotate_counterclockwise(self, photo_id: str) -> PhotoEntity:
        """Rotate display orientation by -90 degrees."""
        with self._lock:
            entity = self.get(photo_id)
            return self.set_rotation(photo_id, normalize_angle(entity.rotation - 90))

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _replace(self, entity: PhotoEntity) -> PhotoEntity:
        """Persist and swap in an edited copy (position unchanged)."""
        self.store.put(entity)
        self._photos[entity.id] = entity
        return entity

    def _load(self) -> None:
        stored = self.store.get_all()
        ranked = sorted(stored, key=lambda e: (e.position, e.created_at, e.id))
        repaired = []
        for rank, entity in enumerate(ranked, start=1):
            if entity.position != rank:
                entity = entity.with_position(rank)
                repaired.append(entity)
            self._photos[entity.id] = entity
            self._order.append(entity.id)
        if repaired:
            logger.warning(f"Repaired {len(repaired)} non-dense photo positions on load")
            self.store.put_many(repaired)
        logger.debug(f"Loaded collection with {len(self._order)} photos")
