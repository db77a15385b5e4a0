import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import photo_report
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from photo_report.collection import InMemoryPhotoStore, PhotoCollection  # noqa: E402
from photo_report.config import ReportConfig  # noqa: E402


def encode_image(size=(320, 240), color=(200, 30, 30), fmt="JPEG") -> bytes:
    """Encode a solid-colour image of size in fmt."""
    mode = "RGBA" if fmt == "PNG" else "RGB"
    fill = color + (255,) if mode == "RGBA" else color
    img = Image.new(mode, size, fill)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


# Common test fixtures
@pytest.fixture
def jpeg_bytes() -> bytes:
    """A small landscape JPEG."""
    return encode_image((320, 240))


@pytest.fixture
def png_bytes() -> bytes:
    """A small landscape PNG with an alpha channel."""
    return encode_image((320, 240), fmt="PNG")


@pytest.fixture
def image_factory():
    """Factory for encoded test images."""
    return encode_image


@pytest.fixture
def memory_store() -> InMemoryPhotoStore:
    return InMemoryPhotoStore()


@pytest.fixture
def collection(memory_store) -> PhotoCollection:
    """Empty collection over an in-memory store."""
    return PhotoCollection(memory_store)


@pytest.fixture
def filled_collection(collection, jpeg_bytes) -> PhotoCollection:
    """Collection holding five photos, positions 1..5."""
    collection.add_many([(jpeg_bytes, 320, 240)] * 5)
    return collection


@pytest.fixture
def report_config() -> ReportConfig:
    return ReportConfig(case_id="AB1234/25", version="1", group="2")
