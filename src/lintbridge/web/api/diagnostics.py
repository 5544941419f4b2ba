"""REST API for the diagnostic state and single-document analysis."""

from __future__ import annotations

import os

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lintbridge.analyzer.models import ExternalDiagnostic, Severity
from lintbridge.web.serializers import finding_to_dict, result_to_dict

router = APIRouter(tags=["diagnostics"])


class DiagnosticIn(BaseModel):
    source: str
    severity: Severity
    message: str = ""
    line: int = 0


class AnalyzeRequest(BaseModel):
    path: str
    diagnostics: list[DiagnosticIn] = []


@router.get("/diagnostics")
async def list_diagnostics(request: Request):
    snapshot = request.app.state.manager.store.snapshot()
    return {
        path: [finding_to_dict(f) for f in findings]
        for path, findings in snapshot.items()
    }


@router.get("/diagnostics/file")
async def get_diagnostics(path: str, request: Request):
    findings = request.app.state.manager.store.get(path)
    return {
        "path": os.path.abspath(path),
        "findings": [finding_to_dict(f) for f in findings],
    }


@router.post("/analyze")
async def analyze(body: AnalyzeRequest, request: Request):
    if not os.path.isfile(body.path):
        return JSONResponse(
            status_code=404,
            content={"detail": f"File not found: {body.path}"},
        )

    diagnostics = [
        ExternalDiagnostic(
            source=d.source, severity=d.severity, message=d.message, line=d.line
        )
        for d in body.diagnostics
    ]
    result = await request.app.state.manager.analyze_document(body.path, diagnostics)
    return result_to_dict(result)
