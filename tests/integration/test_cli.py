"""
Tests for the gridsynth command-line interface.
"""

import json

import pytest

from gridsynth.main import main


@pytest.fixture
def pattern_file(tmp_path):
    path = tmp_path / "box.txt"
    path.write_text("####\n#  #\n####\n", encoding="utf-8")
    return path


class TestAnalyze:
    def test_lists_predicates(self, pattern_file, capsys):
        assert main(["analyze", str(pattern_file)]) == 0
        out = capsys.readouterr().out
        assert "border" in out
        assert "r == 0 || r == H-1 || c == 0 || c == W-1" in out
        assert "fully parametric" in out

    def test_warnings_for_coordinate_sets(self, tmp_path, capsys):
        path = tmp_path / "scatter.txt"
        path.write_text("x  \n  x\n x \n", encoding="utf-8")
        assert main(["analyze", str(path)]) == 0
        assert "Using coordinate set (3 points)" in capsys.readouterr().out


class TestGenerate:
    def test_prints_program(self, pattern_file, capsys):
        assert main(["generate", str(pattern_file)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("#include <iostream>")
        assert "int H = 3;" in out
        assert "int W = 4;" in out

    def test_writes_program_file(self, pattern_file, tmp_path, capsys):
        target = tmp_path / "out.cpp"
        assert main(["generate", str(pattern_file), "-o", str(target)]) == 0
        assert target.read_text(encoding="utf-8").startswith("#include <iostream>")
        assert "Program written to" in capsys.readouterr().err


class TestVerify:
    def test_matching_output(self, pattern_file, tmp_path, capsys):
        output = tmp_path / "run.txt"
        output.write_text("####\n#  #\n####\n", encoding="utf-8")
        assert main(["verify", str(pattern_file), "--output", str(output)]) == 0
        assert "Output matches grid exactly" in capsys.readouterr().out

    def test_mismatching_output(self, pattern_file, tmp_path, capsys):
        output = tmp_path / "run.txt"
        output.write_text("####\n#  #\n###\n", encoding="utf-8")
        assert main(["verify", str(pattern_file), "--output", str(output)]) == 1
        assert "Row 2, Col 3: expected '#', got (space)" in capsys.readouterr().out

    def test_run_interpreter(self, pattern_file, capsys):
        assert main(["verify", str(pattern_file), "--run", "interpreter"]) == 0

    def test_configured_mode_is_default(self, pattern_file, tmp_path):
        config = tmp_path / "gs.json"
        config.write_text(json.dumps({"execution": {"mode": "interpreter"}}))
        assert main(["--config", str(config), "verify", str(pattern_file)]) == 0


class TestErrors:
    def test_missing_pattern(self, tmp_path, capsys):
        assert main(["analyze", str(tmp_path / "missing.txt")]) == 2
        assert "FILE_READ_ERROR" in capsys.readouterr().err

    def test_pattern_too_large(self, pattern_file, monkeypatch, capsys):
        monkeypatch.setenv("GRIDSYNTH_MAX_WIDTH", "2")
        assert main(["analyze", str(pattern_file)]) == 2
        assert "PATTERN_TOO_LARGE" in capsys.readouterr().err

    def test_missing_config(self, pattern_file, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "none.yaml"), "analyze", str(pattern_file)]) == 2
        assert "CONFIG_NOT_FOUND" in capsys.readouterr().err

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            main([])


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("gridsynth 0.1.0")


def test_undecodable_pattern(tmp_path, capsys):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"#\xff#\n")
    assert main(["analyze", str(path)]) == 2
    assert "FILE_READ_ERROR" in capsys.readouterr().err


def test_undecodable_candidate_output(pattern_file, tmp_path, capsys):
    output = tmp_path / "run.txt"
    output.write_bytes(b"\xfe\xfe\n")
    assert main(["verify", str(pattern_file), "--output", str(output)]) == 2
    assert "FILE_READ_ERROR" in capsys.readouterr().err
