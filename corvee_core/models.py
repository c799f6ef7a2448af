from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping

from .utils import MONTHS, is_within_interval, to_nfc

DEFAULT_COLOR = "has-background-grey-light"

SEED_PEOPLE: tuple[tuple[str, str], ...] = (
    ("Alice", "has-background-danger-light"),
    ("Bob", "has-background-link-light"),
    ("Charlie", "has-background-success-light"),
)

SEED_TASKS: tuple[tuple[str, int], ...] = (
    ("Sol", 1),
    ("Vaisselle", 2),
    ("Lessives", 4),
)


def next_id(existing: Iterable[int]) -> int:
    """Largest id plus one, or 1 for an empty collection. Ids are not monotonic."""
    ids = list(existing)
    return max(ids) + 1 if ids else 1


@dataclass(slots=True)
class Absence:
    start: date
    end: date

    def covers(self, day: date) -> bool:
        return is_within_interval(day, self)

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Absence":
        return cls(
            start=date.fromisoformat(str(data["start"])),
            end=date.fromisoformat(str(data["end"])),
        )


@dataclass(slots=True)
class Person:
    id: int
    name: str
    color: str = DEFAULT_COLOR
    absences: List[Absence] = field(default_factory=list)

    def normalize(self) -> None:
        self.name = to_nfc(self.name.strip())

    def is_absent(self, day: date) -> bool:
        return any(absence.covers(day) for absence in self.absences)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "absences": [absence.to_dict() for absence in self.absences],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Person":
        person = cls(
            id=int(data["id"]),
            name=str(data["name"]),
            color=str(data.get("color") or DEFAULT_COLOR),
            absences=[Absence.from_dict(item) for item in data.get("absences", [])],
        )
        person.normalize()
        return person


@dataclass(slots=True)
class Task:
    id: int
    name: str
    weight: int

    def normalize(self) -> None:
        self.name = to_nfc(self.name.strip())

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        task = cls(id=int(data["id"]), name=str(data["name"]), weight=int(data["weight"]))
        task.normalize()
        return task


@dataclass(frozen=True, slots=True)
class CalendarAssignment:
    date: date
    person_id: int
    task: str

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "person_id": self.person_id, "task": self.task}


def _current_month() -> str:
    return MONTHS[date.today().month - 1]


@dataclass(slots=True)
class State:
    people: Dict[int, Person] = field(default_factory=dict)
    tasks: List[Task] = field(default_factory=list)
    assignments: List[CalendarAssignment] = field(default_factory=list)
    selected_month: str = field(default_factory=_current_month)

    @classmethod
    def seeded(cls) -> "State":
        state = cls()
        for idx, (name, color) in enumerate(SEED_PEOPLE, start=1):
            state.people[idx] = Person(id=idx, name=name, color=color)
        for idx, (name, weight) in enumerate(SEED_TASKS, start=1):
            state.tasks.append(Task(id=idx, name=name, weight=weight))
        return state

    def clone(self) -> "State":
        return State(
            people={
                pid: replace(person, absences=[replace(block) for block in person.absences])
                for pid, person in self.people.items()
            },
            tasks=[replace(task) for task in self.tasks],
            assignments=list(self.assignments),
            selected_month=self.selected_month,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "people": [person.to_dict() for person in self.people.values()],
            "tasks": [task.to_dict() for task in self.tasks],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "State":
        people = {person.id: person for person in (Person.from_dict(item) for item in data.get("people", []))}
        tasks: List[Task] = []
        for position, item in enumerate(data.get("tasks", []), start=1):
            payload = dict(item)
            payload.setdefault("id", position)
            tasks.append(Task.from_dict(payload))
        return cls(people=people, tasks=tasks)
