"""
Module: images

Purpose:
    Image handling for the photo report pipeline: stateless pixel
    transforms, HEIC conversion, the import path and the lossless
    rotation model.

Key Classes:
    - RotationModel: Rotation metadata -> display image
    - PhotoImporter: Validate/compress files into a collection
    - HeicConverter: HEIC -> JPEG

Dependencies:
    - PIL: Image manipulation
    - pillow_heif: HEIC decoding
"""

from .transform import (
    EXPORT_QUALITY,
    IMPORT_QUALITY,
    ProcessedImage,
    compress_once,
    decode,
    encode,
    resize_to_bounds,
    rotate,
)
from .rotation import RotationModel
from .heic import HeicConverter
from .importer import ImportOutcome, ImportReport, ImportSource, PhotoImporter

__all__ = [
    "EXPORT_QUALITY",
    "IMPORT_QUALITY",
    "ProcessedImage",
    "compress_once",
    "decode",
    "encode",
    "resize_to_bounds",
    "rotate",
    "RotationModel",
    "HeicConverter",
    "ImportOutcome",
    "ImportReport",
    "ImportSource",
    "PhotoImporter",
]
