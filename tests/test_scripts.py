"""Tests for the command-line entry points."""

import sys

import pytest

from pyshaperetrieval.scripts import best_match, plot, table

pytestmark = pytest.mark.filterwarnings("ignore::pyshaperetrieval.errors.DegenerateClass")


def _run(monkeypatch, module, *argv):
    monkeypatch.setattr(sys, "argv", ["prog", *map(str, argv)])
    module.main()


class TestTableScript:

    def test_micro_default(self, monkeypatch, capsys, corpus_files):
        class_path, matrix_path = corpus_files
        _run(monkeypatch, table, class_path, matrix_path, "--quiet", "--workers", "1")
        assert capsys.readouterr().out.split()[:2] == ["1.000", "1.000"]

    def test_class_rows(self, monkeypatch, capsys, corpus_files):
        class_path, matrix_path = corpus_files
        _run(monkeypatch, table, class_path, matrix_path, "--class", "--quiet")
        assert capsys.readouterr().out.split()[0] == "furniture__chair"

    def test_exclusive_granularity(self, monkeypatch, corpus_files):
        class_path, matrix_path = corpus_files
        with pytest.raises(SystemExit):
            _run(monkeypatch, table, class_path, matrix_path, "--class", "--model")

    def test_missing_matrix(self, monkeypatch, capsys, corpus_files, tmp_path):
        class_path, _ = corpus_files
        with pytest.raises(SystemExit) as excinfo:
            _run(monkeypatch, table, class_path, tmp_path / "absent.matrix")
        assert excinfo.value.code == 1
        assert "File not found" in capsys.readouterr().out

    def test_truncated_matrix(self, monkeypatch, capsys, corpus_files, tmp_path):
        class_path, _ = corpus_files
        short = tmp_path / "short.matrix"
        short.write_bytes(b"\x00" * 10)
        with pytest.raises(SystemExit) as excinfo:
            _run(monkeypatch, table, class_path, short, "--quiet")
        assert excinfo.value.code == 1
        assert "short.matrix" in capsys.readouterr().out

    def test_malformed_category_file(self, monkeypatch, capsys, corpus_files, tmp_path):
        _, matrix_path = corpus_files
        broken = tmp_path / "broken.json"
        broken.write_text("not json")
        with pytest.raises(SystemExit) as excinfo:
            _run(monkeypatch, table, broken, matrix_path, "--quiet")
        assert excinfo.value.code == 1
        out = capsys.readouterr().out
        assert out.startswith("Error:")
        assert "broken.json" in out


class TestPlotScript:

    def test_micro_plot(self, monkeypatch, corpus_files, tmp_path):
        class_path, matrix_path = corpus_files
        out = tmp_path / "plots"
        _run(monkeypatch, plot, class_path, matrix_path, "--output-dir", out, "--quiet")
        assert len((out / "test.plot").read_text().splitlines()) == 20

    def test_model_plots_excluding_query(self, monkeypatch, corpus_files, tmp_path):
        class_path, matrix_path = corpus_files
        _run(monkeypatch, plot, class_path, matrix_path, "--output-dir", tmp_path,
             "--model", "--exclude-query", "--quiet")
        lines = (tmp_path / "test.models" / "cup_4.plot").read_text().splitlines()
        assert lines == ["1.000000 0.500000"]


class TestBestMatchScript:

    def test_listings(self, monkeypatch, capsys, corpus_files, tmp_path):
        class_path, matrix_path = corpus_files
        out = tmp_path / "matches"
        _run(monkeypatch, best_match, class_path, matrix_path, out)
        assert "Wrote 5 listings" in capsys.readouterr().out
        assert (out / "furniture__chair__1.txt").exists()
