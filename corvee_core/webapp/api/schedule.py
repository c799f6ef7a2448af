from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ... import errors
from ..container import ServiceContainer
from ..dependencies import get_container
from ..schemas import AssignmentOut, CalendarDay, Message, MonthOut, MonthSelection, TotalEntry

router = APIRouter()


def _month_out(container: ServiceContainer) -> MonthOut:
    year, _month = container.service.current_period()
    return MonthOut(month=container.service.state.selected_month, year=year)


@router.get("/", response_model=List[AssignmentOut])
def list_assignments(container: ServiceContainer = Depends(get_container)) -> List[AssignmentOut]:
    rows = container.read(container.service.list_assignments)
    return [AssignmentOut(**row) for row in rows]


@router.get("/month", response_model=MonthOut)
def get_month(container: ServiceContainer = Depends(get_container)) -> MonthOut:
    return container.read(_month_out, container)


@router.put("/month", response_model=MonthOut)
def select_month(payload: MonthSelection, container: ServiceContainer = Depends(get_container)) -> MonthOut:
    try:
        container.mutate(container.service.select_month, payload.month)
    except errors.ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return container.read(_month_out, container)


@router.post("/distribute", response_model=Message)
def distribute(container: ServiceContainer = Depends(get_container)) -> Message:
    assignments = container.mutate(container.service.distribute)
    return Message(detail=container.localizer.text("assignment.done", count=len(assignments)))


@router.post("/reset", response_model=Message)
def reset_assignments(container: ServiceContainer = Depends(get_container)) -> Message:
    container.mutate(container.service.reset_assignments)
    return Message(detail=container.localizer.text("assignment.reset"))


@router.get("/totals", response_model=List[TotalEntry])
def totals(container: ServiceContainer = Depends(get_container)) -> List[TotalEntry]:
    rows = container.read(container.service.totals)
    return [TotalEntry(**row) for row in rows]


@router.get("/calendar", response_model=List[CalendarDay])
def calendar(container: ServiceContainer = Depends(get_container)) -> List[CalendarDay]:
    rows = container.read(container.service.calendar)
    return [CalendarDay(**row) for row in rows]
