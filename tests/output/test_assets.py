"""Tests for header/footer assets."""
from pathlib import Path

import pytest

from photo_report.output.assets import DEFAULT_TITLE, StaticAssetProvider


class TestStaticAssetProvider:

    def test_header_lines_include_group_and_case(self):
        lines = StaticAssetProvider().header_lines("AB1234/25", "3", "4")
        texts = [line.text for line in lines]
        assert texts[-2].endswith("GEACRIM 4")
        assert texts[-1] == "Boletim de Ocorrência AB1234/25 Versão 3"

    def test_first_two_lines_bold(self):
        lines = StaticAssetProvider(institution_lines=("A", "B", "C")).header_lines("AB1234/25", "1", "1")
        assert [line.bold for line in lines] == [True, True, False, False, False]

    def test_title_and_footer(self):
        assets = StaticAssetProvider(footer_lines=("Rodapé",))
        assert assets.title() == DEFAULT_TITLE
        assert list(assets.footer_lines()) == ["Rodapé"]

    def test_logo_read_lazily(self, tmp_path: Path, png_bytes):
        path = tmp_path / "logo.png"
        assets = StaticAssetProvider(logo_path=path)
        path.write_bytes(png_bytes)
        assert assets.logo() == png_bytes

    def test_missing_logo_raises(self, tmp_path: Path):
        with pytest.raises(OSError):
            StaticAssetProvider(logo_path=tmp_path / "nope.png").logo()

    def test_no_logo(self):
        assert StaticAssetProvider().logo() is None
