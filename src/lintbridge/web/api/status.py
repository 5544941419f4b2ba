"""REST API for the engine's enabled/disabled status."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from lintbridge.session.manager import SessionManager
from lintbridge.web.serializers import result_to_dict

router = APIRouter(tags=["status"])


class ToggleRequest(BaseModel):
    enabled: bool | None = None
    active_document: str | None = None


def _status(manager: SessionManager) -> dict:
    return {
        "status": manager.status.value,
        "enabled": manager.enabled,
        "profile": manager.profile.name,
        "documents": len(manager.store),
    }


@router.get("/status")
async def get_status(request: Request):
    return _status(request.app.state.manager)


@router.post("/toggle")
async def toggle(request: Request, body: ToggleRequest | None = None):
    manager: SessionManager = request.app.state.manager
    body = body or ToggleRequest()
    if body.enabled is None:
        manager.toggle()
    else:
        manager.set_enabled(body.enabled)

    response = _status(manager)
    # Re-enabling refreshes the document the user is looking at
    if manager.enabled and body.active_document:
        result = await manager.analyze_document(body.active_document)
        response["active_document"] = result_to_dict(result)
    return response
