from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class AbsenceIn(BaseModel):
    start: dt.date
    end: dt.date


class AbsenceOut(BaseModel):
    index: int
    start: dt.date
    end: dt.date


class PersonCreate(BaseModel):
    name: str
    color: Optional[str] = None


class PersonUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None


class PersonOut(BaseModel):
    id: int
    name: str
    color: str
    absences: List[AbsenceOut] = Field(default_factory=list)


class TaskCreate(BaseModel):
    name: str
    # range is checked by the service against the configured bounds
    weight: int


class TaskUpdate(BaseModel):
    name: Optional[str] = None
    weight: Optional[int] = None


class TaskOut(BaseModel):
    id: int
    position: int
    name: str
    weight: int


class AssignmentOut(BaseModel):
    date: dt.date
    task: str
    person_id: int
    person: str


class MonthSelection(BaseModel):
    month: str

    @field_validator("month", mode="before")
    @classmethod
    def month_as_text(cls, v: object) -> str:
        return str(v).strip()


class MonthOut(BaseModel):
    month: str
    year: int


class TotalEntry(BaseModel):
    person_id: int
    name: str
    total: int


class CalendarEntry(BaseModel):
    task: str
    person_id: int
    person: str
    color: str


class CalendarDay(BaseModel):
    date: dt.date
    label: str
    absent: List[str] = Field(default_factory=list)
    assignments: List[CalendarEntry] = Field(default_factory=list)


class ConfigGeneral(BaseModel):
    default_locale: str
    name_width: int
    seed_defaults: bool
    default_color: str
    day_format: str


class ConfigTasks(BaseModel):
    min_weight: int
    max_weight: int


class ConfigHistory(BaseModel):
    undo_depth: int


class ConfigPayload(BaseModel):
    general: ConfigGeneral
    tasks: ConfigTasks
    history: ConfigHistory


class Message(BaseModel):
    detail: str


class RosterPathRequest(BaseModel):
    path: Optional[str] = None


class RosterPathResponse(BaseModel):
    path: str


class UndoResponse(BaseModel):
    message: str
