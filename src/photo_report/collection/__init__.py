"""
Module: collection

Purpose:
    The ordered photo collection and its persistence collaborators.

Key Classes:
    - PhotoCollection: Dense 1..N positions with shift-range reindexing
    - PhotoStore: Abstract key-value store keyed by photo id
    - InMemoryPhotoStore / DirectoryPhotoStore: Store implementations
"""

from .store import DirectoryPhotoStore, InMemoryPhotoStore, PhotoStore
from .positioned import PhotoCollection

__all__ = [
    "DirectoryPhotoStore",
    "InMemoryPhotoStore",
    "PhotoStore",
    "PhotoCollection",
]
