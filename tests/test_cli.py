"""Tests for the pbn2json command line and batch ingest."""

import json
import pytest
import shutil
import sys
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

import driver
from convert import main
from ingest import ingest, ingest_files, collect_files

SAMPLE = Path(__file__).parent / "data" / "sample.pbn"

BAD_BOARD = '[Board "9"]\n[Dealer "Q"]\n'


class TestConvert:
    """Tests for convert.main exit codes and output."""

    def test_pretty_output(self, capsys):
        assert main([str(SAMPLE)]) == 0
        out = capsys.readouterr().out
        assert "\n  " in out
        assert len(json.loads(out)) == 3

    def test_compact_output(self, capsys):
        assert main([str(SAMPLE), "--compact"]) == 0
        out = capsys.readouterr().out
        assert "\n  " not in out
        assert len(json.loads(out)) == 3

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        assert "--compact" in capsys.readouterr().out

    def test_missing_path(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().err

    def test_unknown_flag(self, capsys):
        assert main([str(SAMPLE), "--pretty-please"]) == 1

    def test_unreadable_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.pbn")]) == 1
        assert "Error parsing PBN file" in capsys.readouterr().err

    def test_syntax_error(self, tmp_path, capsys):
        path = tmp_path / "broken.pbn"
        path.write_text('[Board "1"]\n\nnot a tag\n')
        assert main([str(path)]) == 1
        assert "line 3" in capsys.readouterr().err

    def test_invalid_board_still_succeeds(self, tmp_path, capsys):
        path = tmp_path / "one_bad.pbn"
        path.write_text(SAMPLE.read_text(encoding="iso-8859-1") + "\n" + BAD_BOARD, encoding="iso-8859-1")
        assert main([str(path)]) == 0
        captured = capsys.readouterr()
        assert [g["board"] for g in json.loads(captured.out)] == ["1", "2", "3"]

    def test_default_encoding_is_latin1(self, tmp_path, capsys):
        path = tmp_path / "latin1.pbn"
        path.write_text('[Board "1"]\n[North "M\u00fcller"]\n', encoding="iso-8859-1")
        assert main([str(path), "--compact"]) == 0
        assert json.loads(capsys.readouterr().out)[0]["north"] == "M\u00fcller"

    def test_utf8_encoding_option(self, tmp_path, capsys):
        path = tmp_path / "utf8.pbn"
        path.write_text('[Board "1"]\n[North "M\u00fcller"]\n', encoding="utf-8")
        assert main([str(path), "--encoding", "utf-8"]) == 0
        assert json.loads(capsys.readouterr().out)[0]["north"] == "M\u00fcller"

    def test_unknown_encoding(self, capsys):
        assert main([str(SAMPLE), "--encoding", "klingon"]) == 1
        assert "Error parsing PBN file" in capsys.readouterr().err


class TestIngest:
    """Tests for batch ingest of several files."""

    @pytest.fixture
    def tree(self, tmp_path):
        (tmp_path / "sub").mkdir()
        shutil.copy(SAMPLE, tmp_path / "a.pbn")
        shutil.copy(SAMPLE, tmp_path / "sub" / "b.PBN")
        (tmp_path / "notes.txt").write_text("ignore me")
        (tmp_path / "broken.pbn").write_text("not pbn\n")
        return tmp_path

    def test_collect_files(self, tree):
        files = collect_files([tree])
        assert sorted(f.name for f in files) == ["a.pbn", "b.PBN", "broken.pbn"]

    @pytest.mark.parametrize("parallelize", [True, False])
    def test_ingest(self, tree, parallelize):
        games = ingest_files([tree], parallelize=parallelize)
        assert len(games) == 6

    def test_no_files(self, tmp_path):
        assert ingest_files([tmp_path]) == []

    def test_failures_are_counted(self, tree):
        collector = ingest([tree], parallelize=True)
        assert collector.success == 2
        assert collector.failed == 1


class TestDriver:
    """Tests for the pbn-ingest batch command."""

    def test_csv_output(self, tmp_path):
        out = tmp_path / "games.csv"
        assert driver.main([str(SAMPLE), "-o", str(out)]) == 0
        lines = out.read_text().splitlines()
        assert lines[0].startswith("event,site,date,board")
        assert len(lines) == 4

    def test_compact_json(self, capsys):
        assert driver.main([str(SAMPLE), "--compact", "--serial"]) == 0
        out = capsys.readouterr().out
        assert "\n  " not in out
        assert len(json.loads(out)) == 3

    def test_unparseable_file_fails(self, tmp_path, capsys):
        shutil.copy(SAMPLE, tmp_path / "good.pbn")
        (tmp_path / "broken.pbn").write_text("not pbn\n")
        assert driver.main([str(tmp_path)]) == 1
        assert len(json.loads(capsys.readouterr().out)) == 3

    def test_nothing_to_ingest_fails(self, tmp_path):
        assert driver.main([str(tmp_path)]) == 1

    def test_unwritable_output_fails(self, tmp_path):
        assert driver.main([str(SAMPLE), "-o", str(tmp_path / "missing" / "games.csv")]) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
