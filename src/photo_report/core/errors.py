"""
Module: core.errors

Purpose:
    Exception hierarchy shared by every layer of the photo report
    pipeline. Validation errors are raised before any mutation happens;
    export errors are terminal for a single export attempt.

Key Classes:
    - PhotoReportError: Base class for all package errors
    - ValidationError: Rejected input (angle, position, case id, file)
    - DecodeError: Corrupt or unreadable image data
    - NotFoundError: Operation on an id absent from the collection
    - PreconditionError: Export requested in an invalid state
    - ExportFailure: Any failure while resolving or serialising a document

Used By:
    - Every photo_report subpackage
"""

from __future__ import annotations


class PhotoReportError(Exception):
    """Base class for photo report errors."""


class ValidationError(PhotoReportError, ValueError):
    """Input rejected before any state change."""


class OutOfRangeError(ValidationError):
    """Target position outside [1, N]."""


class InvalidAngleError(ValidationError):
    """Rotation angle is not one of 0, 90, 180, 270."""


class InvalidCaseIdError(ValidationError):
    """Case identifier does not match the AA0000/00 shape."""


class UnsupportedFileError(ValidationError):
    """File type is not an accepted image format."""


class FileTooLargeError(ValidationError):
    """File exceeds the maximum accepted import size."""


class DecodeError(PhotoReportError):
    """Image bytes could not be decoded."""


class NotFoundError(PhotoReportError, KeyError):
    """Photo id not present in the collection."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class PreconditionError(PhotoReportError):
    """Operation requested while its preconditions do not hold."""


class EmptyDocumentError(PreconditionError):
    """Export requested for a collection with no photos."""


class ExportFailure(PhotoReportError):
    """Export aborted; no partial document was produced."""
