"""Tests for the quickpick command line."""

import sys

import pytest

from quickpick import cli


@pytest.fixture
def candidates_file(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)

    path = tmp_path / "fruits.txt"
    path.write_text("Apple\nBanana\n\nGrape\nApricot\n")
    return path


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["quickpick", *args])
    return cli.main()


class TestFilter:
    """Test non-interactive filtering."""

    def test_prints_ranked_matches(self, monkeypatch, capsys, candidates_file):
        assert run(monkeypatch, str(candidates_file), "--filter", "ap") == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Apple"
        assert set(out) == {"Apple", "Grape", "Apricot"}

    def test_max_limits_output(self, monkeypatch, capsys, candidates_file):
        assert run(monkeypatch, str(candidates_file), "-f", "ap", "--max", "1") == 0
        assert capsys.readouterr().out.splitlines() == ["Apple"]

    def test_empty_query_lists_everything(self, monkeypatch, capsys, candidates_file):
        assert run(monkeypatch, str(candidates_file), "-f", "", "--max", "0") == 0
        assert capsys.readouterr().out.splitlines() == ["Apple", "Banana", "Grape", "Apricot"]

    def test_shorter_first(self, monkeypatch, capsys, candidates_file):
        assert run(monkeypatch, str(candidates_file), "-f", "a", "--shorter-first", "--max", "0") == 0
        out = capsys.readouterr().out.splitlines()
        assert out[-1] == "Apricot"

    def test_no_matches(self, monkeypatch, capsys, candidates_file):
        assert run(monkeypatch, str(candidates_file), "-f", "zzz") == 1
        assert "No matches" in capsys.readouterr().err

    def test_reads_stdin(self, monkeypatch, capsys, candidates_file):
        monkeypatch.setattr(sys, "stdin", candidates_file.open())
        assert run(monkeypatch, "--filter", "ban") == 0
        assert capsys.readouterr().out.splitlines() == ["Banana"]


class TestErrors:
    """Test argument validation."""

    def test_negative_max(self, monkeypatch, capsys, candidates_file):
        assert run(monkeypatch, str(candidates_file), "-f", "a", "--max", "-1") == 2
        assert "Error" in capsys.readouterr().err

    def test_missing_file(self, monkeypatch, capsys, candidates_file):
        assert run(monkeypatch, "nope.txt", "-f", "a") == 2
        assert "Error" in capsys.readouterr().err

    def test_piped_stdin_needs_file_for_picker(self, monkeypatch, capsys, candidates_file):
        monkeypatch.setattr(sys, "stdin", candidates_file.open())
        assert run(monkeypatch) == 2
        assert "interactive" in capsys.readouterr().err
