"""
Tests for the export pipeline.

Test Coverage:
- export(): Filename, page count, sink delivery, metadata manifest
- Precondition and failure mapping
- Display images resolved from originals with rotation applied
- confirmation_summary()
"""
from unittest.mock import MagicMock, patch

import pytest

from photo_report.controller import DocumentAssembler, confirmation_summary
from photo_report.core.errors import EmptyDocumentError, ExportFailure, PreconditionError
from photo_report.core.models import PhotoEntity
from photo_report.output.sinks import CallbackSink, DocumentSink, FileSink


@pytest.fixture
def delivered():
    return []


@pytest.fixture
def assembler(delivered) -> DocumentAssembler:
    sink = CallbackSink(lambda doc, name: delivered.append((doc, name)) or f"memory://{name}")
    return DocumentAssembler(sink=sink, max_workers=2)


class TestExport:

    def test_exports_pdf_with_expected_name(self, assembler, filled_collection, report_config, delivered):
        # Act
        result = assembler.export(filled_collection, report_config)

        # Assert
        assert result.filename == "AB1234-25_relatorio-fotografico.pdf"
        assert result.document.startswith(b"%PDF-")
        assert result.page_count == 3
        assert result.photo_count == 5
        assert result.location == "memory://AB1234-25_relatorio-fotografico.pdf"
        assert delivered == [(result.document, result.filename)]

    def test_metadata_manifest_follows_positions(self, assembler, filled_collection, report_config):
        ordered = [p.id for p in filled_collection]
        result = assembler.export(filled_collection, report_config)
        manifest = result.metadata["manifest"]
        assert [m["page"] for m in manifest] == [1, 2, 3]
        assert [pid for m in manifest for pid in m["photo_ids"]] == ordered
        assert [m["has_title"] for m in manifest] == [True, False, False]

    def test_export_without_sink(self, filled_collection, report_config):
        result = DocumentAssembler().export(filled_collection, report_config)
        assert result.location is None
        assert result.document.startswith(b"%PDF-")

    def test_empty_collection_raises_precondition(self, assembler, collection, report_config, delivered):
        with pytest.raises(EmptyDocumentError):
            assembler.export(collection, report_config)
        assert delivered == []

    def test_empty_is_precondition_error(self, assembler, collection, report_config):
        with pytest.raises(PreconditionError):
            assembler.export(collection, report_config)

    def test_export_leaves_collection_unchanged(self, assembler, filled_collection, report_config):
        photo = filled_collection.list_photos()[0]
        filled_collection.set_rotation(photo.id, 90)
        before = filled_collection.snapshot()
        assembler.export(filled_collection, report_config)
        assert filled_collection.snapshot() == before

    def test_repeated_exports_are_identical_in_content(self, assembler, filled_collection, report_config):
        first = assembler.export(filled_collection, report_config)
        second = assembler.export(filled_collection, report_config)
        assert first.page_count == second.page_count
        assert first.metadata["manifest"] == second.metadata["manifest"]

    def test_file_sink_round_trip(self, tmp_path, filled_collection, report_config):
        result = DocumentAssembler(sink=FileSink(tmp_path)).export(filled_collection, report_config)
        assert (tmp_path / result.filename).read_bytes() == result.document


class TestFailures:
    """Failures surface as ExportFailure and nothing is delivered."""

    def test_corrupt_original_raises_export_failure(self, assembler, collection, report_config, delivered):
        collection.insert(PhotoEntity(id="bad", original_image=b"\xff\xd8\xffjunk", width=10, height=10))
        with pytest.raises(ExportFailure):
            assembler.export(collection, report_config)
        assert delivered == []

    def test_corrupt_rotated_original_raises_export_failure(self, assembler, collection, report_config):
        collection.insert(
            PhotoEntity(id="bad", original_image=b"\xff\xd8\xffjunk", width=10, height=10, rotation=90)
        )
        with pytest.raises(ExportFailure):
            assembler.export(collection, report_config)

    def test_sink_error_raises_export_failure(self, filled_collection, report_config):
        sink = MagicMock(spec=DocumentSink)
        sink.deliver.side_effect = OSError("disk full")
        with pytest.raises(ExportFailure):
            DocumentAssembler(sink=sink).export(filled_collection, report_config)

    def test_when_callback_rejects_upload_then_export_failure(self, filled_collection, report_config):
        # Arrange
        def reject(document, filename):
            raise RuntimeError("upload rejected")

        assembler = DocumentAssembler(sink=CallbackSink(reject))

        # Act / Assert
        with pytest.raises(ExportFailure) as excinfo:
            assembler.export(filled_collection, report_config)
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_render_error_raises_export_failure(self, assembler, filled_collection, report_config, delivered):
        with patch("photo_report.controller.render_to_pdf", side_effect=OSError("boom")):
            with pytest.raises(ExportFailure):
                assembler.export(filled_collection, report_config)
        assert delivered == []


class TestResolveBlocks:

    def test_rotated_photo_gets_swapped_dimensions(self, assembler, collection, image_factory):
        photo = collection.add(image_factory((200, 100)), 200, 100)
        collection.set_rotation(photo.id, 270)
        [block] = assembler.resolve_blocks(collection.snapshot())
        assert (block.width, block.height) == (100, 200)
        assert block.image != photo.original_image

    def test_unrotated_photo_uses_original_bytes(self, assembler, collection, jpeg_bytes):
        photo = collection.add(jpeg_bytes, 320, 240)
        [block] = assembler.resolve_blocks(collection.snapshot())
        assert block.image == photo.original_image

    def test_blocks_keep_position_order(self, assembler, filled_collection):
        photos = filled_collection.list_photos()
        filled_collection.move(photos[4].id, 1)
        blocks = assembler.resolve_blocks(filled_collection.snapshot())
        assert [b.photo_id for b in blocks] == [p.id for p in filled_collection]
        assert [b.position for b in blocks] == [1, 2, 3, 4, 5]


class TestConfirmationSummary:

    def test_summary_text(self, filled_collection, report_config):
        text = confirmation_summary(filled_collection, report_config)
        assert text == "Confirma a geração do relatório em PDF?\n\nBO: AB1234/25\nTotal de fotos: 5"
