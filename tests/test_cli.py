"""
tests/test_cli.py
=================

End‑to‑end tests for the ``refurb`` command line against a temp SQLite file.
"""

import json

import pytest

from refurb.cli import main


@pytest.fixture
def run(tmp_path):
    db = tmp_path / "cli.db"

    def _run(*argv):
        return main(["--db", str(db), *argv])

    return _run


def test_add_list_and_summary(run, capsys):
    assert run("unit", "add", "--version", "1.0", "--cost", "50", "--sale", "80") == 0
    assert run("controller", "add", "--model", "Duke", "--status", "Refurb") == 0
    out = capsys.readouterr().out
    assert "Added XBX-101" in out
    assert "Added CTL-101" in out

    run("unit", "list")
    assert "XBX-101" in capsys.readouterr().out

    run("summary")
    out = capsys.readouterr().out
    assert "profit $30.00" in out
    assert "Refurb: 1" in out


def test_non_numeric_cost_is_zero(run, capsys):
    run("unit", "add", "--cost", "lots")
    run("unit", "list")
    assert "cost $    0.00" in capsys.readouterr().out


def test_update_and_toggle(run, capsys):
    run("unit", "add", "--version", "1.0")
    run("unit", "update", "XBX-101", "--status", "Sold", "--sale", "99")
    run("unit", "toggle", "XBX-101", "recap")
    out = capsys.readouterr().out
    assert "Recap → done (6%)" in out
    run("unit", "checklist", "XBX-101")
    assert "[x] recap" in capsys.readouterr().out


def test_delete_needs_confirmation(run, capsys, monkeypatch):
    run("unit", "add")
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert run("unit", "delete", "XBX-101") == 1
    run("unit", "list")
    assert "XBX-101" in capsys.readouterr().out


def test_delete_and_undo(run, capsys, monkeypatch):
    run("unit", "add")
    monkeypatch.setattr("builtins.input", lambda prompt: "y")
    run("unit", "delete", "XBX-101")
    assert "Deleted XBX-101" in capsys.readouterr().out
    # each command is a new process; the slot is read back from the store
    run("unit", "undo")
    assert "Restored XBX-101" in capsys.readouterr().out
    run("unit", "list")
    assert "XBX-101" in capsys.readouterr().out
    run("unit", "undo")
    assert "Nothing to undo." in capsys.readouterr().out


def test_recalc_id(run, capsys):
    run("unit", "add")
    run("unit", "add")
    run("unit", "delete", "XBX-102", "--yes")
    run("unit", "recalc-id")
    # XBX-102 can still be undone, so it stays taken
    assert "Next ID: XBX-103" in capsys.readouterr().out
    run("unit", "undo")
    run("unit", "add")
    assert "Added XBX-103" in capsys.readouterr().out


def test_week_add_and_list(run, capsys):
    run("week", "add", "--week", "2025-W35", "--started", "10", "--completed", "4",
        "--revived", "3", "--parted", "1")
    assert "completion 40.0%, success 75.0%" in capsys.readouterr().out
    run("week", "list")
    assert "2025-W35" in capsys.readouterr().out


def test_export_and_import(run, tmp_path, capsys):
    run("unit", "add", "--version", "1.0", "--notes", "a, b")
    backup = tmp_path / "backup.json"
    run("export", "json", "--out", str(backup))
    doc = json.loads(backup.read_text())
    assert doc["nextId"] == 102

    csv_out = tmp_path / "units.csv"
    run("export", "csv", "unit", "--out", str(csv_out))
    assert '"a, b"' in csv_out.read_text()

    doc["units"].append({"id": "XBX-200"})
    doc["nextId"] = 0
    backup.write_text(json.dumps(doc))
    assert run("import", str(backup)) == 0
    assert "Import complete" in capsys.readouterr().out
    run("unit", "add")
    assert "Added XBX-201" in capsys.readouterr().out


def test_import_bad_file(run, tmp_path, capsys):
    run("unit", "add")
    bad = tmp_path / "bad.json"
    bad.write_text("{oops")
    assert run("import", str(bad)) == 1
    assert "Import failed" in capsys.readouterr().err
    run("unit", "list")
    assert "XBX-101" in capsys.readouterr().out
