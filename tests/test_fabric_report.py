"""Tests for the fabric report CLI."""

import csv
import json

import pytest

from claim_parser import ParseError
from fabric_report import build_report, format_report, main, read_claims
from report_config import ReportConfig

EXAMPLE = "#1 @ 1,3: 4x4\n#2 @ 3,1: 4x4\n#3 @ 5,5: 2x2\n"


@pytest.fixture
def claims_file(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text(EXAMPLE)
    return path


def test_main_prints_report(claims_file, capsys) -> None:
    main([str(claims_file)])
    out = capsys.readouterr().out
    assert "Cells claimed more than once: 4" in out
    assert "Non-overlapping claim ids: 3" in out


def test_main_writes_csv(claims_file, tmp_path, capsys) -> None:
    out_csv = tmp_path / "claims.csv"
    main([str(claims_file), "-o", str(out_csv), "--cross-check", "-v"])
    out = capsys.readouterr().out
    assert "Cross-check against dense grid passed" in out
    with out_csv.open(newline="") as f:
        rows = list(csv.reader(f))
    assert rows == [["claim_id", "overlapping"], ["1", "1"], ["2", "1"], ["3", "0"]]


def test_main_aborts_on_malformed_line(tmp_path, capsys) -> None:
    path = tmp_path / "input.txt"
    path.write_text("#1 @ 1,3: 4x4\n#2 @ 3,1\n")
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    assert "Error: line 2: malformed claim line" in capsys.readouterr().out


def test_main_skips_malformed_line(tmp_path, capsys) -> None:
    path = tmp_path / "input.txt"
    path.write_text("#1 @ 1,3: 4x4\n#2 @ 3,1\n#3 @ 5,5: 2x2\n")
    main([str(path), "--skip-malformed"])
    out = capsys.readouterr().out
    assert "Warning: skipping line 2" in out
    assert "Non-overlapping claim ids: 1, 3" in out


def test_main_uses_config_file(claims_file, tmp_path, capsys) -> None:
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"id_separator": ";"}))
    with claims_file.open("a") as f:
        f.write("#4 @ 20,20: 1x1\n")
    main([str(claims_file), "--config", str(cfg)])
    assert "Non-overlapping claim ids: 3;4" in capsys.readouterr().out


def test_read_claims_abort_raises(tmp_path) -> None:
    path = tmp_path / "input.txt"
    path.write_text("\n#1 @ 1,3: 4x4 9\n")
    with pytest.raises(ParseError) as excinfo:
        read_claims(str(path))
    assert excinfo.value.line_number == 2


def test_build_report_finalizes(claims_file) -> None:
    claims, skipped = read_claims(str(claims_file))
    assert skipped == 0
    acc = build_report(claims)
    assert acc.finalized
    config = ReportConfig(id_separator=",")
    assert format_report(acc, config) == (
        "Cells claimed more than once: 4\nNon-overlapping claim ids: 3"
    )


def test_main_cross_check_oversized_grid_exits(tmp_path, capsys) -> None:
    path = tmp_path / "input.txt"
    path.write_text("#1 @ 1000000,1000000: 1x1\n")
    with pytest.raises(SystemExit) as excinfo:
        main([str(path), "--cross-check"])
    assert excinfo.value.code == 1
    assert "Error: cross-check: dense grid not built" in capsys.readouterr().out


def test_main_rejects_bad_config(claims_file, tmp_path, capsys) -> None:
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"sort_ids": "false"}))
    with pytest.raises(SystemExit) as excinfo:
        main([str(claims_file), "--config", str(cfg)])
    assert excinfo.value.code == 1
    assert "Error: invalid config" in capsys.readouterr().out


def test_read_claims_skip_counts_and_warns(tmp_path, capsys) -> None:
    path = tmp_path / "input.txt"
    path.write_text("#1 @ 1,3: 4x4\nbad\n#2 @ 1,3: 4x4 7\n")
    claims, skipped = read_claims(str(path), on_error="skip")
    assert [c.id for c in claims] == [1]
    assert skipped == 2
    out = capsys.readouterr().out
    assert "Warning: skipping line 2" in out
    assert "Warning: skipping line 3" in out
