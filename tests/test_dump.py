"""Tests for the dump tool."""

import pytest

from candy_values.dump import format_page, main
from candy_values.types import Nat8
from candy_values.workspace import AddressedChunk

WORKSPACE_TEXT = 'zone { nat8(1), "ab" }; zone { nat(300) }'


@pytest.fixture
def workspace_file(tmp_path, monkeypatch):
    """Write a small workspace and clear the environment."""
    monkeypatch.delenv("CANDY_MAX_PAGE_SIZE", raising=False)
    monkeypatch.delenv("CANDY_LOG_LEVEL", raising=False)
    path = tmp_path / "workspace.candy"
    path.write_text(WORKSPACE_TEXT)
    return path


class TestFormatPage:
    """Tests for page rendering."""

    def test_header_and_lines(self):
        """Test the page header and one line per chunk."""
        lines = format_page(0, [AddressedChunk(0, 0, Nat8(1))])
        assert lines == ["page 0 (1 chunks, 3 bytes)", "  [0:0] Nat8 1"]


class TestMain:
    """Tests for the command-line entry point."""

    def test_single_page(self, workspace_file, capsys):
        """Test that everything fits the default budget."""
        assert main([str(workspace_file)]) == 0
        out = capsys.readouterr().out
        assert "page 0 (3 chunks" in out
        assert "[0:1] Text ab" in out
        assert "[1:0] Nat 300" in out
        assert "page 1" not in out

    def test_small_pages(self, workspace_file, capsys):
        """Test paging with a tiny budget."""
        assert main([str(workspace_file), "--max-page-size", "2"]) == 0
        out = capsys.readouterr().out
        assert "page 2" in out
        assert "page 3" not in out

    def test_page_from_environment(self, workspace_file, capsys, monkeypatch):
        """Test that the page budget comes from the environment."""
        monkeypatch.setenv("CANDY_MAX_PAGE_SIZE", "2")
        assert main([str(workspace_file)]) == 0
        assert "page 2" in capsys.readouterr().out

    def test_one_page(self, workspace_file, capsys):
        """Test showing one page and its chunking type."""
        assert main([str(workspace_file), "-m", "2", "--page", "1"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0].startswith("page 1 (1 chunks")
        assert out[-1] == "chunk"

        assert main([str(workspace_file), "-m", "2", "--page", "2"]) == 0
        assert capsys.readouterr().out.splitlines()[-1] == "eof"

    def test_json(self, workspace_file, capsys):
        """Test JSON rendering of values."""
        assert main([str(workspace_file), "--json"]) == 0
        assert '[0:1] Text "ab"' in capsys.readouterr().out

    def test_sizes(self, workspace_file, capsys):
        """Test the size listing."""
        assert main([str(workspace_file), "--sizes"]) == 0
        out = capsys.readouterr().out
        assert "zone 0: 9 bytes" in out
        assert "[1:0] Nat 2" in out

    def test_missing_file(self, tmp_path, capsys):
        """Test a path that does not exist."""
        assert main([str(tmp_path / "missing.candy")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_syntax_error(self, tmp_path, capsys, monkeypatch):
        """Test reporting unparseable input."""
        monkeypatch.delenv("CANDY_LOG_LEVEL", raising=False)
        path = tmp_path / "bad.candy"
        path.write_text("zone { nat( }")
        assert main([str(path)]) == 1
        assert "Error parsing" in capsys.readouterr().err

    def test_bad_environment(self, workspace_file, capsys, monkeypatch):
        """Test reporting invalid configuration."""
        monkeypatch.setenv("CANDY_MAX_PAGE_SIZE", "lots")
        assert main([str(workspace_file)]) == 1
        assert "CANDY_MAX_PAGE_SIZE" in capsys.readouterr().err

    def test_negative_page(self, workspace_file, capsys):
        """Test that a negative page id is reported."""
        assert main([str(workspace_file), "--page", "-1"]) == 1
        assert "page_id" in capsys.readouterr().err
