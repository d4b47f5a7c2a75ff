import os
import sys

from fastapi.testclient import TestClient  # type: ignore

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from main import app

client = TestClient(app)

CODE = """
package android.app;
import android.annotation.RequiresPermission;
public class Mgr {
    /** TODO: document */
    @RequiresPermission("SEND_SMS")
    public void send() {}
}
"""


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_check_returns_diagnostics_and_report():
    r = client.post("/check", json={"code": CODE, "filename": "Mgr.java"})
    assert r.status_code == 200
    body = r.json()
    assert [d["kind"] for d in body["diagnostics"]] == ["TODO"]
    assert body["diagnostics"][0]["item"] == "android.app.Mgr.send"
    assert body["diagnostics"][0]["location"].startswith("Mgr.java")
    assert body["report"]["method"][0]["permission"] == ["android.permission.SEND_SMS"]
    assert body["parse_errors"] == []


def test_check_rejects_invalid_code():
    r = client.post("/check", json={"code": "class {"})
    assert r.status_code == 400


def test_project_check_lists_parse_errors():
    r = client.post(
        "/check/project",
        json={"files": [{"path": "Bad.java", "code": "class {"}, {"path": "Mgr.java", "code": CODE}]},
    )
    assert r.status_code == 200
    body = r.json()
    assert [e["file"] for e in body["parse_errors"]] == ["Bad.java"]
    assert len(body["report"]["method"]) == 1


def test_parse_returns_graph():
    r = client.post("/parse", json={"code": CODE})
    assert r.status_code == 200
    kinds = {n["kind"] for n in r.json()["nodes"]}
    assert {"Class", "Method"} <= kinds
