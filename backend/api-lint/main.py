from fastapi import FastAPI, HTTPException # type: ignore
from pydantic import BaseModel # type: ignore
from typing import Any, Dict, List

from adapters.java_adapter import JavaAdapter
from apimodel.codebase import Codebase
from checks.api_checks import ApiChecks
from checks.diagnostics import Reporter
from checks.permission_report import PermissionReport

app = FastAPI(title="API Lint (Java docs & permissions)")
java_adapter = JavaAdapter()


class CheckRequest(BaseModel):
    code: str
    filename: str | None = None


class SourceFile(BaseModel):
    path: str
    code: str


class ProjectCheckRequest(BaseModel):
    files: List[SourceFile]


class DiagnosticOut(BaseModel):
    kind: str
    item: str
    message: str
    location: str


class CheckResponse(BaseModel):
    diagnostics: List[DiagnosticOut]
    report: Dict[str, List[Dict[str, Any]]]
    parse_errors: List[Dict[str, str]] = []


def _run_checks(codebase: Codebase) -> CheckResponse:
    reporter = Reporter()
    report = PermissionReport()
    report.start()
    ApiChecks(reporter, report).check(codebase)
    return CheckResponse(
        diagnostics=[DiagnosticOut(**d.to_json()) for d in reporter.diagnostics],
        report=report.to_document(),
        parse_errors=list(codebase.parse_errors),
    )


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/parse")
def parse(req: CheckRequest):
    try:
        codebase = java_adapter.build_codebase_for_code(req.code, req.filename)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return codebase.to_debug_json()


@app.post("/check", response_model=CheckResponse)
def check(req: CheckRequest):
    try:
        codebase = java_adapter.build_codebase_for_code(req.code, req.filename)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _run_checks(codebase)


@app.post("/check/project", response_model=CheckResponse)
def check_project(req: ProjectCheckRequest):
    # invalid files are skipped and listed in parse_errors
    codebase = java_adapter.build_codebase_for_sources([(f.path, f.code) for f in req.files])
    return _run_checks(codebase)
