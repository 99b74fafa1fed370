"""
Integration tests for the candidate window visualizer.
"""

import sys

import pytest
from PIL import Image

from tools.visualize import main, render_candidates


class TestRenderCandidates:
    def test_writes_pngs(self, rom_file, tmp_path, capsys):
        out_dir = tmp_path / "renders"
        paths = render_candidates(str(rom_file), str(out_dir), ["hirom", "lorom"], 8)
        assert [p.name for p in paths] == ["test_hirom.png", "test_lorom.png"]
        for path in paths:
            with Image.open(path) as img:
                assert img.size == (128, 128)
        out = capsys.readouterr().out
        assert "Rendered lorom window ($7F00, score 11)" in out
        assert "Rendered hirom window ($FF00, score -6)" in out


class TestMain:
    def test_single_candidate(self, monkeypatch, rom_file, tmp_path):
        monkeypatch.setattr(
            sys, "argv", ["snes-visualize", str(rom_file), str(tmp_path), "-c", "lorom"]
        )
        main()
        assert (tmp_path / "test_lorom.png").exists()
        assert not (tmp_path / "test_hirom.png").exists()

    def test_missing_rom(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "argv", ["snes-visualize", str(tmp_path / "none.sfc")])
        with pytest.raises(SystemExit):
            main()

    def test_bad_size(self, monkeypatch, tmp_path, capsys):
        bad = tmp_path / "bad.sfc"
        bad.write_bytes(bytes(1000))
        monkeypatch.setattr(sys, "argv", ["snes-visualize", str(bad), str(tmp_path)])
        with pytest.raises(SystemExit):
            main()
        assert "offset could not be found" in capsys.readouterr().out

    def test_bad_cell_size(self, monkeypatch, rom_file):
        monkeypatch.setattr(
            sys, "argv", ["snes-visualize", str(rom_file), "--cell-size", "0"]
        )
        with pytest.raises(SystemExit):
            main()
