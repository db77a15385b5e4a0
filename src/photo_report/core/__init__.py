"""
Core package: data models, error hierarchy and boundary validation.
"""

from .errors import (
    DecodeError,
    EmptyDocumentError,
    ExportFailure,
    FileTooLargeError,
    InvalidAngleError,
    InvalidCaseIdError,
    NotFoundError,
    OutOfRangeError,
    PhotoReportError,
    PreconditionError,
    UnsupportedFileError,
    ValidationError,
)
from .models import PhotoEntity, CaseId, pdf_filename, parse_case_id
from .validation import ValidationResult

__all__ = [
    "DecodeError",
    "EmptyDocumentError",
    "ExportFailure",
    "FileTooLargeError",
    "InvalidAngleError",
    "InvalidCaseIdError",
    "NotFoundError",
    "OutOfRangeError",
    "PhotoReportError",
    "PreconditionError",
    "UnsupportedFileError",
    "ValidationError",
    "PhotoEntity",
    "CaseId",
    "pdf_filename",
    "parse_case_id",
    "ValidationResult",
]
