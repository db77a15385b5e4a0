"""Tests for photo stores."""
import json
from pathlib import Path

import pytest

from photo_report.core.models import PhotoEntity
from photo_report.collection import DirectoryPhotoStore, PhotoCollection
from photo_report.collection.store import METADATA_FILENAME, ORIGINAL_FILENAME


@pytest.fixture
def entity(jpeg_bytes) -> PhotoEntity:
    return PhotoEntity.create(jpeg_bytes, 320, 240).with_position(1)


class TestDirectoryPhotoStore:

    def test_put_then_get_all(self, tmp_path: Path, entity):
        store = DirectoryPhotoStore(tmp_path)
        store.put(entity)
        assert store.get_all() == [entity]

    def test_layout_on_disk(self, tmp_path: Path, entity):
        DirectoryPhotoStore(tmp_path).put(entity)
        photo_dir = tmp_path / entity.id
        assert (photo_dir / ORIGINAL_FILENAME).read_bytes() == entity.original_image
        metadata = json.loads((photo_dir / METADATA_FILENAME).read_text(encoding="utf-8"))
        assert metadata["position"] == 1

    def test_metadata_update_keeps_original(self, tmp_path: Path, entity):
        store = DirectoryPhotoStore(tmp_path)
        store.put(entity)
        store.put(entity.with_caption("Sala").with_rotation(90))
        [loaded] = store.get_all()
        assert loaded.caption == "Sala"
        assert loaded.rotation == 90
        assert loaded.original_image == entity.original_image

    def test_delete_and_clear(self, tmp_path: Path, entity, jpeg_bytes):
        store = DirectoryPhotoStore(tmp_path)
        store.put(entity)
        store.put(PhotoEntity.create(jpeg_bytes, 320, 240))
        store.delete(entity.id)
        store.delete(entity.id)
        assert len(store.get_all()) == 1
        store.clear()
        assert store.get_all() == []

    def test_unreadable_entry_skipped(self, tmp_path: Path, entity):
        store = DirectoryPhotoStore(tmp_path)
        store.put(entity)
        broken = tmp_path / "broken"
        broken.mkdir()
        (broken / METADATA_FILENAME).write_text("{not json", encoding="utf-8")
        assert [e.id for e in store.get_all()] == [entity.id]

    def test_collection_survives_reopen(self, tmp_path: Path, jpeg_bytes):
        first = PhotoCollection(DirectoryPhotoStore(tmp_path))
        photos = first.add_many([(jpeg_bytes, 320, 240)] * 3)
        first.move(photos[2].id, 1)
        first.set_caption(photos[0].id, "Entrada")

        reopened = PhotoCollection(DirectoryPhotoStore(tmp_path))
        assert [p.id for p in reopened] == [photos[2].id, photos[0].id, photos[1].id]
        assert reopened.get(photos[0].id).caption == "Entrada"
