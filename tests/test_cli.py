from __future__ import annotations

import json
import logging

import pytest

from dashboard.cli import main


@pytest.fixture(autouse=True)
def reset_dashboard_logger():
    yield
    logger = logging.getLogger("dashboard")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture()
def csv_file(tmp_path, acquisition_csv):
    path = tmp_path / "acquisition.csv"
    path.write_text(acquisition_csv, encoding="utf-8")
    return path


def _run(state_dir, *argv):
    return main(["--state-dir", str(state_dir), *argv])


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_ingest_then_show(tmp_path, csv_file, capsys):
    state_dir = tmp_path / "state"
    assert _run(state_dir, "ingest", "ACQUISITION", str(csv_file)) == 0
    assert "+3 rows" in capsys.readouterr().out

    assert _run(state_dir, "show", "acquisition") == 0
    out = capsys.readouterr().out
    assert "google" in out
    assert "1,350" in out


def test_unknown_category_exit_code(tmp_path, capsys):
    assert _run(tmp_path, "show", "REVENUE") == 2
    assert "Unknown category" in capsys.readouterr().out


def test_set_rejects_non_numeric_metric(tmp_path, csv_file, capsys):
    _run(tmp_path, "ingest", "ACQUISITION", str(csv_file))
    assert _run(tmp_path, "set", "ACQUISITION", "--metric", "Source") == 2


def test_dump_and_load(tmp_path, csv_file):
    _run(tmp_path / "a", "ingest", "BEHAVIOR", str(csv_file))
    out = tmp_path / "dump.json"
    assert _run(tmp_path / "a", "dump", "BEHAVIOR", "--output", str(out)) == 0
    assert list(json.loads(out.read_text(encoding="utf-8"))) == ["BEHAVIOR"]

    assert _run(tmp_path / "b", "load", str(out)) == 0
    data = json.loads((tmp_path / "b" / "analyticsDashboardState.json").read_text(encoding="utf-8"))
    assert len(data["categories"]["BEHAVIOR"]["rows"]) == 3


def test_export(tmp_path, csv_file, capsys):
    out = tmp_path / "report.xlsx"
    assert _run(tmp_path, "export", "--output", str(out)) == 0
    assert "Nothing to export" in capsys.readouterr().out
    assert not out.exists()

    _run(tmp_path, "ingest", "CONVERSION", str(csv_file))
    assert _run(tmp_path, "export", "--output", str(out)) == 0
    assert out.exists()


def test_load_of_malformed_state_exits_cleanly(tmp_path, csv_file, capsys):
    _run(tmp_path, "ingest", "ACQUISITION", str(csv_file))
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"ACQUISITION": {"rows": [{"record": {}}]}}), encoding="utf-8")

    assert _run(tmp_path, "load", str(bad)) == 2
    assert "Error" in capsys.readouterr().out

    data = json.loads((tmp_path / "analyticsDashboardState.json").read_text(encoding="utf-8"))
    assert len(data["categories"]["ACQUISITION"]["rows"]) == 3


def test_select_prints_totals(tmp_path, csv_file, capsys):
    _run(tmp_path, "ingest", "ACQUISITION", str(csv_file))
    capsys.readouterr()

    assert _run(tmp_path, "select", "ACQUISITION", "--none") == 0
    out = capsys.readouterr().out
    assert "deselected 3 rows" in out
    assert "Totals: Sessions: 0" in out
