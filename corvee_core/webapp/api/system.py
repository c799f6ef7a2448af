from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ...errors import CorveeError
from ..container import ServiceContainer
from ..dependencies import get_container
from ..schemas import RosterPathRequest, RosterPathResponse, UndoResponse

router = APIRouter()


@router.post("/export", response_model=RosterPathResponse)
def export_roster(payload: RosterPathRequest, container: ServiceContainer = Depends(get_container)) -> RosterPathResponse:
    try:
        target = container.export_roster(payload.path)
    except OSError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return RosterPathResponse(path=str(target))


@router.post("/import", response_model=RosterPathResponse)
def import_roster(payload: RosterPathRequest, container: ServiceContainer = Depends(get_container)) -> RosterPathResponse:
    if not payload.path:
        raise HTTPException(status_code=400, detail="path is required")
    try:
        target = container.import_roster(payload.path)
    except CorveeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return RosterPathResponse(path=str(target))


@router.post("/undo", response_model=UndoResponse)
def undo(container: ServiceContainer = Depends(get_container)) -> UndoResponse:
    try:
        label = container.undo()
    except CorveeError as exc:
        raise HTTPException(status_code=400, detail=container.localizer.text("undo.empty")) from exc
    return UndoResponse(message=container.localizer.text("undo.applied", label=label))
