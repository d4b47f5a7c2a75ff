import json
import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cli import collect_java_files, main

CODE = """
package android.app;
import android.annotation.RequiresPermission;
public class Mgr {
    /** TODO: document */
    @RequiresPermission(allOf = {"A", "B"})
    public void send() {}
}
"""


def write_sources(tmp_path):
    src = tmp_path / "src" / "android" / "app"
    src.mkdir(parents=True)
    (src / "Mgr.java").write_text(CODE)
    (src / "notes.txt").write_text("not java")
    return tmp_path / "src"


def test_collect_java_files(tmp_path):
    root = write_sources(tmp_path)
    files = collect_java_files([str(root)])
    assert [os.path.basename(f) for f in files] == ["Mgr.java"]


def test_cli_writes_report_and_prints_diagnostics(tmp_path, capsys):
    root = write_sources(tmp_path)
    out = tmp_path / "perms.json"
    assert main([str(root), "--report", str(out)]) == 0

    printed = capsys.readouterr().out
    assert "Mgr.java" in printed
    assert "warning: Documentation mentions 'TODO' [Todo]" in printed
    assert "1 issue(s) found" in printed

    doc = json.loads(out.read_text())
    assert doc["method"][0]["attribute"] == "allOf"
    assert doc["field"] == []


def test_cli_strict_and_no_report(tmp_path, monkeypatch):
    root = write_sources(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main([str(root), "--strict", "--no-report"]) == 1
    assert not (tmp_path / "permissions.json").exists()


def test_cli_namespace_flags(tmp_path, monkeypatch):
    root = write_sources(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main([str(root), "--strict", "--exclude", "android.app."]) == 0
    assert json.loads((tmp_path / "permissions.json").read_text()) == {"method": [], "field": []}
