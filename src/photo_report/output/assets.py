"""
Module: output.assets

Purpose:
    Static content for the page chrome: logo image, header lines, the
    first-page title and footer lines.

Key Classes:
    - HeaderLine: One header text line and its weight
    - AssetProvider: Abstract provider interface
    - StaticAssetProvider: Fixed institution texts plus optional logo file

Used By:
    - output.renderer: Header/title/footer drawing
    - controller: Export pipeline
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Relatório Fotográfico"

DEFAULT_INSTITUTION_LINES: Tuple[str, ...] = (
    "Secretaria da Segurança Pública",
    "POLÍCIA CIVIL DO ESTADO DE SÃO PAULO",
    "Departamento Estadual de Homicídios e Proteção à Pessoa – DHPP",
    'Divisão de Homicídios "Dr. FRANCISCO DE ASSIS CAMARGO MAGNO"',
)

DEFAULT_GROUP_LINE = "Grupo Especial de Atendimento a Local de Crime – GEACRIM {group}"
DEFAULT_CASE_LINE = "Boletim de Ocorrência {case_id} Versão {version}"

DEFAULT_FOOTER_LINES: Tuple[str, ...] = (
    "Endereço: Rua Brigadeiro Tobias, 527 – Centro – São Paulo/SP – CEP 01032-001",
    "Telefone: (11) 3311-3980   |   Email: dhpp.dh@policiacivil.sp.gov.br",
)


@dataclass(frozen=True)
class HeaderLine:
    """A header text line; bold lines use the larger heading font."""

    text: str
    bold: bool = False


class AssetProvider(ABC):
    """Supplies the logo and the static texts drawn on every page."""

    @abstractmethod
    def logo(self) -> Optional[bytes]:
        """Encoded logo image, or None to leave the logo box empty."""

    @abstractmethod
    def header_lines(self, case_id: str, version: str, group: str) -> Sequence[HeaderLine]:
        """Header lines for a report."""

    @abstractmethod
    def title(self) -> str:
        """Title printed on the first page."""

    @abstractmethod
    def footer_lines(self) -> Sequence[str]:
        """Footer lines, identical on every page."""


class StaticAssetProvider(AssetProvider):
    """
    Asset provider with fixed texts and an optional logo.

    The first two institution lines are bold, matching the printed
    letterhead.

    Example:
        >>> assets = StaticAssetProvider(logo_path=Path("logo.jpg"))
        >>> assets.header_lines("AB1234/25", "1", "2")[-1].text
        'Boletim de Ocorrência AB1234/25 Versão 1'
    """

    def __init__(
        self,
        logo_path: Optional[Path] = None,
        *,
        logo_bytes: Optional[bytes] = None,
        institution_lines: Sequence[str] = DEFAULT_INSTITUTION_LINES,
        bold_lines: int = 2,
        title: str = DEFAULT_TITLE,
        footer_lines: Sequence[str] = DEFAULT_FOOTER_LINES,
    ) -> None:
        self._logo_path = Path(logo_path) if logo_path else None
        self._logo_bytes = logo_bytes
        self._institution_lines = tuple(institution_lines)
        self._bold_lines = bold_lines
        self._title = title
        self._footer_lines = tuple(footer_lines)

    def logo(self) -> Optional[bytes]:
        """
        Return logo bytes, reading logo_path lazily on first use.

        Raises:
            OSError: If logo_path is set but cannot be read
        """
        if self._logo_bytes is None and self._logo_path is not None:
            self._logo_bytes = self._logo_path.read_bytes()
            logger.debug(f"Loaded logo from {self._logo_path}")
        return self._logo_bytes

    def header_lines(self, case_id: str, version: str, group: str) -> Sequence[HeaderLine]:
        lines = [
            HeaderLine(text, bold=i < self._bold_lines)
            for i, text in enumerate(self._institution_lines)
        ]
        lines.append(HeaderLine(DEFAULT_GROUP_LINE.format(group=group)))
        lines.append(HeaderLine(DEFAULT_CASE_LINE.format(case_id=case_id, version=version)))
        return lines

    def title(self) -> str:
        return self._title

    def footer_lines(self) -> Sequence[str]:
        return self._footer_lines
