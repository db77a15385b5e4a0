"""
Module: core.validation

Purpose:
    Boundary validation for user-supplied input. Each check_* function
    returns a ValidationResult instead of prompting or raising, so a
    presentation layer decides how to surface the message. require_*
    variants raise the matching ValidationError subclass.

Key Functions:
    - sniff_image_format(): Identify an image format from magic bytes
    - check_import_file(): Size, declared type and content checks
    - require_import_file(): Raising variant used by the importer
    - check_caption(): Caption bound check (reports truncation)

Key Classes:
    - ValidationResult: Typed ok/error result

Dependencies:
    - mimetypes (std)

Used By:
    - images.importer: Import path
    - config: Version and group selection checks
    - cli: Caption truncation notice
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Optional

from .errors import (
    FileTooLargeError,
    UnsupportedFileError,
    ValidationError,
)
from .models.photos import MAX_CAPTION_LENGTH, caption_length, clamp_caption

MAX_IMPORT_BYTES = 10 * 1024 * 1024

JPEG = "jpeg"
PNG = "png"
WEBP = "webp"
HEIC = "heic"

SUPPORTED_MIME_TYPES = {
    "image/jpeg": JPEG,
    "image/jpg": JPEG,
    "image/png": PNG,
    "image/webp": WEBP,
    "image/heic": HEIC,
    "image/heif": HEIC,
    "image/heic-sequence": HEIC,
    "image/heif-sequence": HEIC,
}

SUPPORTED_EXTENSIONS = {
    ".jpg": JPEG,
    ".jpeg": JPEG,
    ".png": PNG,
    ".webp": WEBP,
    ".heic": HEIC,
    ".heif": HEIC,
}

# ISO-BMFF brands that identify HEIC/HEIF still images
HEIF_BRANDS = {b"heic", b"heix", b"hevc", b"hevx", b"heim", b"heis", b"mif1", b"msf1"}


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a boundary check (immutable).

    Attributes:
        ok: True if the input is acceptable
        error: Human-readable reason when ok is False
        value: Normalised value when ok is True (e.g. detected format)
        warning: Non-fatal note (e.g. caption was truncated)
    """

    ok: bool
    error: Optional[str] = None
    value: Any = None
    warning: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None, warning: Optional[str] = None) -> "ValidationResult":
        return cls(ok=True, value=value, warning=warning)

    @classmethod
    def failure(cls, error: str) -> "ValidationResult":
        return cls(ok=False, error=error)

    def __bool__(self) -> bool:
        return self.ok


def sniff_image_format(header: bytes) -> Optional[str]:
    """
    Identify an image format from its leading bytes.

    Recognises JPEG (FF D8 FF), PNG (89 50 4E 47), WebP (RIFF....WEBP)
    and HEIC/HEIF (ftyp box with a HEIF brand).

    Args:
        header: At least the first 12 bytes of the file

    Returns:
        One of "jpeg", "png", "webp", "heic", or None if unknown

    Example:
        >>> sniff_image_format(b"\\xff\\xd8\\xff\\xe0" + b"\\x00" * 8)
        'jpeg'
    """
    if header[:3] == b"\xff\xd8\xff":
        return JPEG
    if header[:4] == b"\x89PNG":
        return PNG
    if header[:4] == b"RIFF" and header[8:12] == b"WEBP":
        return WEBP
    if header[4:8] == b"ftyp" and header[8:12] in HEIF_BRANDS:
        return HEIC
    return None


def declared_format(filename: Optional[str], mime_type: Optional[str] = None) -> Optional[str]:
    """Resolve the format a file claims to be from its MIME type or extension."""
    if mime_type and mime_type.lower() in SUPPORTED_MIME_TYPES:
        return SUPPORTED_MIME_TYPES[mime_type.lower()]
    if filename:
        suffix = PurePath(filename).suffix.lower()
        if suffix in SUPPORTED_EXTENSIONS:
            return SUPPORTED_EXTENSIONS[suffix]
        guessed, _ = mimetypes.guess_type(filename)
        if guessed and guessed.lower() in SUPPORTED_MIME_TYPES:
            return SUPPORTED_MIME_TYPES[guessed.lower()]
    return None


def check_import_file(
    data: bytes,
    filename: Optional[str] = None,
    mime_type: Optional[str] = None,
    size: Optional[int] = None,
) -> ValidationResult:
    """
    Validate a candidate import file.

    Rules:
    1. Size must not exceed MAX_IMPORT_BYTES (10 MiB)
    2. Declared type (MIME or extension) must be supported
    3. Magic bytes must identify a supported format; when they do, the
       content wins over the declared type (a .png holding JPEG bytes is
       accepted as JPEG)
    4. HEIC is accepted on declared type alone, since some encoders emit
       brands not listed in HEIF_BRANDS

    Args:
        data: File bytes (may be only a prefix of a large file)
        filename: Declared name
        mime_type: Declared MIME type
        size: Full file size when data is a prefix; defaults to len(data)

    Returns:
        ValidationResult whose value is the detected format
    """
    label = filename or "<memory>"
    if size is None:
        size = len(data)
    if _is_too_large(size, data):
        size_mib = size / (1024 * 1024)
        return ValidationResult.failure(
            f"{label}: file too large ({size_mib:.1f} MiB, max 10 MiB)"
        )
    if not data:
        return ValidationResult.failure(f"{label}: file is empty")

    claimed = declared_format(filename, mime_type)
    if claimed is None:
        return ValidationResult.failure(
            f"{label}: unsupported file type; use JPEG, PNG, WebP or HEIC"
        )

    actual = sniff_image_format(data[:12])
    if actual is None and claimed == HEIC:
        actual = HEIC
    if actual is None:
        return ValidationResult.failure(f"{label}: file is corrupt or not an image")

    warning = None
    if actual != claimed:
        warning = f"{label}: declared {claimed} but content is {actual}"
    return ValidationResult.success(actual, warning=warning)


def require_import_file(
    data: bytes,
    filename: Optional[str] = None,
    mime_type: Optional[str] = None,
    size: Optional[int] = None,
) -> ValidationResult:
    """
    Raising variant of check_import_file().

    Returns:
        The successful ValidationResult (value is the detected format,
        warning notes a declared/actual type mismatch)

    Raises:
        FileTooLargeError: If the file exceeds 10 MiB
        UnsupportedFileError: For any other rejection
    """
    result = check_import_file(data, filename, mime_type, size)
    if not result.ok:
        if _is_too_large(len(data) if size is None else size, data):
            raise FileTooLargeError(result.error)
        raise UnsupportedFileError(result.error)
    return result


def _is_too_large(size: int, data: bytes) -> bool:
    return size > MAX_IMPORT_BYTES or len(data) > MAX_IMPORT_BYTES


def check_caption(text: Optional[str]) -> ValidationResult:
    """
    Check a caption against the length bound.

    Always succeeds; value is the clamped caption and warning notes a
    truncation.
    """
    clamped = clamp_caption(text)
    warning = None
    if text and caption_length(text) > MAX_CAPTION_LENGTH:
        warning = f"Caption truncated to {MAX_CAPTION_LENGTH} characters"
    return ValidationResult.success(clamped, warning=warning)


def check_choice(name: str, value: str, allowed: tuple[str, ...]) -> ValidationResult:
    """Check that a required selection (version, group) was made."""
    if not value:
        return ValidationResult.failure(f"{name} must be selected")
    if allowed and value not in allowed:
        return ValidationResult.failure(f"{name} must be one of {', '.join(allowed)}, got {value!r}")
    return ValidationResult.success(value)


def raise_for(result: ValidationResult) -> Any:
    """Return result.value or raise ValidationError with its message."""
    if not result.ok:
        raise ValidationError(result.error)
    return result.value
