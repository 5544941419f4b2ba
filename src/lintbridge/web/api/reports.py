"""REST API for workspace scans and stored reports."""

from __future__ import annotations

import asyncio
import os

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lintbridge.analyzer.workspace import discover_sources
from lintbridge.storage.repos import ReportRepo
from lintbridge.web.serializers import report_to_dict

router = APIRouter(tags=["reports"])


class ScanRequest(BaseModel):
    root: str
    exclude: list[str] = []


@router.post("/scan")
async def scan(body: ScanRequest, request: Request):
    if not os.path.isdir(body.root):
        return JSONResponse(
            status_code=404,
            content={"detail": f"Directory not found: {body.root}"},
        )

    manager = request.app.state.manager
    exclude = [*manager.config.exclude, *body.exclude]
    files = await asyncio.to_thread(discover_sources, body.root, exclude=exclude)
    report = await manager.scan_workspace(files, root=os.path.abspath(body.root))

    repo = ReportRepo(request.app.state.db)
    await repo.save(report)
    return report_to_dict(report)


@router.post("/scan/cancel")
async def cancel_scan(request: Request):
    request.app.state.manager.cancel_scan()
    return {"status": "cancelling"}


@router.get("/reports")
async def list_reports(request: Request, limit: int = 50, offset: int = 0):
    repo = ReportRepo(request.app.state.db)
    return await repo.list_all(limit=limit, offset=offset)


@router.get("/reports/{report_id}")
async def get_report(report_id: str, request: Request):
    repo = ReportRepo(request.app.state.db)
    report = await repo.get(report_id)
    if not report:
        return JSONResponse(
            status_code=404,
            content={"detail": "Report not found"},
        )
    return report
