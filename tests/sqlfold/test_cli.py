"""Tests for the ``sqlfold`` command line."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from sqlfold.cli import EXIT_ERROR, EXIT_OK, EXIT_WOULD_FORMAT, MAX_WIDTH_ENV, main

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def stdin(monkeypatch: pytest.MonkeyPatch):
    def _feed(text: str) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return _feed


class TestStdin:
    def test_formats_to_stdout(self, stdin, capsys: pytest.CaptureFixture[str]):
        stdin("SELECT a FROM t")
        assert main([]) == EXIT_OK
        assert capsys.readouterr().out == "select a from t;\n"

    def test_dash_means_stdin(self, stdin, capsys: pytest.CaptureFixture[str]):
        stdin("SELECT 1; SELECT 2")
        assert main(["-"]) == EXIT_OK
        assert capsys.readouterr().out == "select 1;\nselect 2;\n"

    def test_max_width(self, stdin, capsys: pytest.CaptureFixture[str]):
        stdin("SELECT a, b FROM t")
        assert main(["--max-width", "10"]) == EXIT_OK
        assert capsys.readouterr().out == "select\n  a,\n  b\nfrom\n  t;\n"

    def test_max_width_from_environment(
        self, stdin, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ):
        monkeypatch.setenv(MAX_WIDTH_ENV, "10")
        stdin("SELECT a, b FROM t")
        assert main([]) == EXIT_OK
        assert capsys.readouterr().out == "select\n  a,\n  b\nfrom\n  t;\n"

    def test_flag_overrides_environment(
        self, stdin, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ):
        monkeypatch.setenv(MAX_WIDTH_ENV, "10")
        stdin("SELECT a, b FROM t")
        assert main(["--max-width", "80"]) == EXIT_OK
        assert capsys.readouterr().out == "select a, b from t;\n"


class TestFiles:
    def test_rewrites_in_place(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        path = tmp_path / "query.sql"
        path.write_text("SELECT a FROM t", encoding="utf-8")
        assert main([str(path)]) == EXIT_OK
        assert path.read_text(encoding="utf-8") == "select a from t;\n"
        assert capsys.readouterr().out == ""

    def test_formatted_file_left_alone(self, tmp_path: Path):
        path = tmp_path / "query.sql"
        path.write_text("select a from t;\n", encoding="utf-8")
        mtime = path.stat().st_mtime_ns
        assert main([str(path)]) == EXIT_OK
        assert path.stat().st_mtime_ns == mtime

    def test_verbose_logs_rewrite(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        path = tmp_path / "query.sql"
        path.write_text("SELECT 1", encoding="utf-8")
        with caplog.at_level("INFO", logger="sqlfold.cli"):
            assert main([str(path), "-v"]) == EXIT_OK
        assert f"reformatted {path}" in caplog.text


class TestCheck:
    def test_formatted_input(self, stdin, capsys: pytest.CaptureFixture[str]):
        stdin("select 1;\n")
        assert main(["--check"]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_unformatted_input(self, stdin, capsys: pytest.CaptureFixture[str]):
        stdin("SELECT 1")
        assert main(["--check"]) == EXIT_WOULD_FORMAT
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "<stdin> would be reformatted" in captured.err

    def test_file_not_written(self, tmp_path: Path):
        path = tmp_path / "query.sql"
        path.write_text("SELECT 1", encoding="utf-8")
        assert main(["--check", str(path)]) == EXIT_WOULD_FORMAT
        assert path.read_text(encoding="utf-8") == "SELECT 1"


class TestErrors:
    def test_parse_error(self, stdin, capsys: pytest.CaptureFixture[str]):
        stdin("SELECT 1 2")
        assert main([]) == EXIT_ERROR
        assert capsys.readouterr().err == (
            'sqlfold: <stdin>: Invalid expression / Unexpected token at or near "2" (position 10)\n'
        )

    def test_unsupported_statement(self, stdin, capsys: pytest.CaptureFixture[str]):
        stdin("DELETE FROM t")
        assert main([]) == EXIT_ERROR
        assert "unsupported statement: delete" in capsys.readouterr().err

    def test_file_untouched_on_error(self, tmp_path: Path):
        path = tmp_path / "broken.sql"
        path.write_text("SELECT (", encoding="utf-8")
        assert main([str(path)]) == EXIT_ERROR
        assert path.read_text(encoding="utf-8") == "SELECT ("

    @pytest.mark.parametrize("width", ["0", "-3", "wide"])
    def test_invalid_width(self, width: str, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as exc_info:
            main(["--max-width", width])
        assert exc_info.value.code == 2
        assert "--max-width" in capsys.readouterr().err
