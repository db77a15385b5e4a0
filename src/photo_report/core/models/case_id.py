"""
Module: core.models.case_id

Purpose:
    The case identifier ("boletim de ocorrência" number) that keys a
    report, shaped AA0000/00: two letters, four digits, a slash and two
    digits. Also derives the output document filename.

Key Functions:
    - parse_case_id(): Validate and normalise an identifier
    - format_case_id(): Apply the input mask to free-form text
    - pdf_filename(): AA0000/00 -> AA0000-00_relatorio-fotografico.pdf

Dependencies:
    - re (std)

Used By:
    - config: ReportConfig validation
    - controller: Export filename
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import InvalidCaseIdError

CASE_ID_PATTERN = re.compile(r"^([A-Z]{2})(\d{4})/(\d{2})$")
PDF_SUFFIX = "_relatorio-fotografico.pdf"


@dataclass(frozen=True)
class CaseId:
    """
    Parsed case identifier (immutable).

    Attributes:
        letters: Two-letter prefix
        number: Four-digit sequence number
        year: Two-digit year suffix

    Example:
        >>> str(CaseId("AB", "1234", "25"))
        'AB1234/25'
    """

    letters: str
    number: str
    year: str

    def __str__(self) -> str:
        return f"{self.letters}{self.number}/{self.year}"

    @property
    def filename_stem(self) -> str:
        return f"{self.letters}{self.number}-{self.year}"


def format_case_id(raw: str) -> str:
    """
    Apply the AA0000/00 input mask to free-form text.

    Non-alphanumerics are dropped and a slash is inserted after the first
    six characters. The result is not validated.

    Example:
        >>> format_case_id("ab 1234-25")
        'AB1234/25'
    """
    cleaned = re.sub(r"[^A-Za-z0-9]", "", raw or "").upper()
    if len(cleaned) >= 6:
        return cleaned[:6] + "/" + cleaned[6:8]
    return cleaned


def parse_case_id(text: str) -> CaseId:
    """
    Parse a case identifier of the literal shape AA0000/00.

    Lower-case letters are accepted and upper-cased.

    Raises:
        InvalidCaseIdError: If the text does not match the shape
    """
    candidate = (text or "").strip().upper()
    match = CASE_ID_PATTERN.match(candidate)
    if match is None:
        raise InvalidCaseIdError(
            f"Case id must look like AB1234/25, got {text!r}"
        )
    return CaseId(*match.groups())


def pdf_filename(case_id: str | CaseId) -> str:
    """
    Build the report filename for a case identifier.

    Example:
        >>> pdf_filename("AB1234/25")
        'AB1234-25_relatorio-fotografico.pdf'
    """
    parsed = case_id if isinstance(case_id, CaseId) else parse_case_id(case_id)
    return f"{parsed.filename_stem}{PDF_SUFFIX}"
