"""
Tests for collection.positioned

Test Coverage:
- Dense 1..N positions after every mutation
- move(): Shift-range semantics, no-op, range errors
- remove(): Gap closing, idempotence
- Caption and rotation edits
- Position repair on load
- Store batching
"""
import random
from threading import Thread

import pytest

from photo_report.core.errors import InvalidAngleError, NotFoundError, OutOfRangeError
from photo_report.core.models import PhotoEntity
from photo_report.collection import InMemoryPhotoStore, PhotoCollection


def ids(collection):
    return [p.id for p in collection]


class FailingBatchStore(InMemoryPhotoStore):
    """In-memory store whose batch writes can be switched to fail."""

    def __init__(self):
        super().__init__()
        self.fail_batches = False

    def put_many(self, entities):
        if self.fail_batches:
            raise OSError("disk full")
        super().put_many(entities)


class TestInsert:

    def test_add_appends_at_tail(self, collection, jpeg_bytes):
        a = collection.add(jpeg_bytes, 320, 240)
        b = collection.add(jpeg_bytes, 320, 240)
        assert (a.position, b.position) == (1, 2)
        assert ids(collection) == [a.id, b.id]

    def test_carried_position_ignored(self, filled_collection, jpeg_bytes):
        entity = PhotoEntity.create(jpeg_bytes, 320, 240).with_position(2)
        placed = filled_collection.insert(entity)
        assert placed.position == 6

    def test_duplicate_id_rejected(self, filled_collection):
        existing = filled_collection.list_photos()[0]
        with pytest.raises(ValueError):
            filled_collection.insert(existing)

    def test_when_batch_repeats_an_id_then_rejected_without_write(self, filled_collection, memory_store, jpeg_bytes):
        # Arrange
        entity = PhotoEntity(id="dup", original_image=jpeg_bytes, width=1, height=1)
        before = memory_store.write_calls

        # Act / Assert
        with pytest.raises(ValueError):
            filled_collection.insert_many([entity, entity])
        assert memory_store.write_calls == before
        assert "dup" not in filled_collection
        assert filled_collection.positions() == [1, 2, 3, 4, 5]

    def test_add_many_single_write(self, collection, memory_store, jpeg_bytes):
        before = memory_store.write_calls
        collection.add_many([(jpeg_bytes, 320, 240)] * 3)
        assert memory_store.write_calls == before + 1
        assert collection.positions() == [1, 2, 3]


class TestMove:
    """Tests for shift-range moves."""

    def test_move_to_front_shifts_others_down(self, filled_collection):
        # Arrange
        before = ids(filled_collection)

        # Act
        filled_collection.move(before[3], 1)

        # Assert
        assert ids(filled_collection) == [before[3], before[0], before[1], before[2], before[4]]
        assert filled_collection.positions() == [1, 2, 3, 4, 5]

    def test_move_to_back_shifts_others_up(self, filled_collection):
        before = ids(filled_collection)
        filled_collection.move(before[0], 5)
        assert ids(filled_collection) == before[1:] + [before[0]]
        assert filled_collection.positions() == [1, 2, 3, 4, 5]

    def test_move_is_not_a_swap(self, filled_collection):
        before = ids(filled_collection)
        filled_collection.move(before[0], 3)
        assert ids(filled_collection) == [before[1], before[2], before[0], before[3], before[4]]

    def test_when_target_is_current_position_then_no_write(self, filled_collection, memory_store):
        photo = filled_collection.list_photos()[2]
        before = memory_store.write_calls
        filled_collection.move(photo.id, 3)
        assert memory_store.write_calls == before

    def test_move_uses_single_batched_write(self, filled_collection, memory_store):
        photo = filled_collection.list_photos()[4]
        before = memory_store.write_calls
        filled_collection.move(photo.id, 1)
        assert memory_store.write_calls == before + 1

    @pytest.mark.parametrize("target", [0, 6, -1])
    def test_out_of_range_target(self, filled_collection, target):
        photo = filled_collection.list_photos()[0]
        before = ids(filled_collection)
        with pytest.raises(OutOfRangeError):
            filled_collection.move(photo.id, target)
        assert ids(filled_collection) == before

    def test_unknown_id(self, filled_collection):
        with pytest.raises(NotFoundError):
            filled_collection.move("missing", 1)

    def test_random_moves_keep_positions_dense(self, filled_collection):
        rng = random.Random(7)
        for _ in range(50):
            photo = rng.choice(filled_collection.list_photos())
            filled_collection.move(photo.id, rng.randint(1, 5))
            assert filled_collection.positions() == [1, 2, 3, 4, 5]
            assert [p.position for p in filled_collection] == [1, 2, 3, 4, 5]


class TestRemove:

    def test_remove_closes_gap(self, filled_collection):
        before = ids(filled_collection)
        filled_collection.remove(before[1])
        assert ids(filled_collection) == [before[0]] + before[2:]
        assert filled_collection.positions() == [1, 2, 3, 4]

    def test_remove_unknown_is_noop(self, filled_collection, memory_store):
        writes = memory_store.write_calls
        filled_collection.remove("missing")
        assert len(filled_collection) == 5
        assert memory_store.write_calls == writes

    def test_remove_twice_is_idempotent(self, filled_collection):
        photo = filled_collection.list_photos()[0]
        filled_collection.remove(photo.id)
        filled_collection.remove(photo.id)
        assert len(filled_collection) == 4

    def test_new_photo_after_remove_goes_to_tail(self, filled_collection, jpeg_bytes):
        filled_collection.remove(filled_collection.list_photos()[1].id)
        added = filled_collection.add(jpeg_bytes, 320, 240)
        assert added.position == 5

    def test_remove_last_does_not_rewrite_others(self, filled_collection, memory_store):
        last = filled_collection.list_photos()[-1]
        before = memory_store.write_calls
        filled_collection.remove(last.id)
        assert memory_store.write_calls == before + 1  # delete only

    def test_when_shift_write_fails_then_store_and_collection_unchanged(self, jpeg_bytes):
        # Arrange
        store = FailingBatchStore()
        collection = PhotoCollection(store)
        collection.add_many([(jpeg_bytes, 320, 240)] * 3)
        before = ids(collection)
        store.fail_batches = True

        # Act
        with pytest.raises(OSError):
            collection.remove(before[0])

        # Assert
        assert ids(collection) == before
        assert collection.positions() == [1, 2, 3]
        stored = sorted(store.get_all(), key=lambda e: e.position)
        assert [e.id for e in stored] == before
        assert [e.position for e in stored] == [1, 2, 3]

    def test_clear(self, filled_collection, memory_store):
        filled_collection.clear()
        assert len(filled_collection) == 0
        assert memory_store.get_all() == []


class TestEdits:

    def test_set_caption_truncates_and_persists(self, filled_collection, memory_store):
        photo = filled_collection.list_photos()[0]
        updated = filled_collection.set_caption(photo.id, "z" * 100)
        assert len(updated.caption) == 78
        stored = {e.id: e for e in memory_store.get_all()}
        assert stored[photo.id].caption == updated.caption

    def test_set_caption_unknown(self, collection):
        with pytest.raises(NotFoundError):
            collection.set_caption("missing", "text")

    def test_set_rotation(self, filled_collection):
        photo = filled_collection.list_photos()[0]
        assert filled_collection.set_rotation(photo.id, 180).rotation == 180
        assert filled_collection.get(photo.id).rotation == 180

    def test_set_rotation_invalid_leaves_photo_unchanged(self, filled_collection):
        photo = filled_collection.list_photos()[0]
        with pytest.raises(InvalidAngleError):
            filled_collection.set_rotation(photo.id, 45)
        assert filled_collection.get(photo.id).rotation == 0

    def test_rotate_helpers_wrap(self, filled_collection):
        photo = filled_collection.list_photos()[0]
        assert filled_collection.rotate_counterclockwise(photo.id).rotation == 270
        assert filled_collection.rotate_clockwise(photo.id).rotation == 0
        assert filled_collection.rotate_clockwise(photo.id).rotation == 90

    def test_edits_keep_position(self, filled_collection):
        photo = filled_collection.list_photos()[2]
        filled_collection.set_caption(photo.id, "Janela")
        filled_collection.set_rotation(photo.id, 90)
        assert filled_collection.get(photo.id).position == 3


class TestLoad:
    """Tests for loading persisted state."""

    def test_gaps_and_duplicates_repaired(self, jpeg_bytes):
        # Arrange
        store = InMemoryPhotoStore()
        entities = [
            PhotoEntity(id="a", original_image=jpeg_bytes, width=1, height=1, position=4, created_at="1"),
            PhotoEntity(id="b", original_image=jpeg_bytes, width=1, height=1, position=2, created_at="2"),
            PhotoEntity(id="c", original_image=jpeg_bytes, width=1, height=1, position=2, created_at="1"),
            PhotoEntity(id="d", original_image=jpeg_bytes, width=1, height=1, position=9, created_at="0"),
        ]
        store.put_many(entities)

        # Act
        collection = PhotoCollection(store)

        # Assert
        assert ids(collection) == ["c", "b", "a", "d"]
        assert collection.positions() == [1, 2, 3, 4]
        assert sorted(e.position for e in store.get_all()) == [1, 2, 3, 4]

    def test_dense_store_not_rewritten(self, filled_collection, memory_store):
        before = memory_store.write_calls
        reloaded = PhotoCollection(memory_store)
        assert ids(reloaded) == ids(filled_collection)
        assert memory_store.write_calls == before


class TestConcurrency:

    def test_concurrent_moves_keep_positions_dense(self, filled_collection):
        photos = filled_collection.list_photos()

        def worker(seed):
            rng = random.Random(seed)
            for _ in range(40):
                filled_collection.move(rng.choice(photos).id, rng.randint(1, 5))

        threads = [Thread(target=worker, args=(seed,)) for seed in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert filled_collection.positions() == [1, 2, 3, 4, 5]
        assert sorted(ids(filled_collection)) == sorted(p.id for p in photos)

    def test_snapshot_unaffected_by_later_moves(self, filled_collection):
        snap = filled_collection.snapshot()
        filled_collection.move(snap[4].id, 1)
        assert [p.position for p in snap] == [1, 2, 3, 4, 5]
