from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Callable, List

from .config import Config
from .distributor import distribute, weight_totals
from .errors import NotFoundError, ValidationError
from .models import Absence, CalendarAssignment, Person, State, Task, next_id
from .repository import StateRepository
from .utils import days_in_month, format_date, month_index, month_name, parse_iso_date

logger = logging.getLogger(__name__)


class CoreService:
    """Validated commands over the session state.

    Invalid input raises before anything is recorded, so a rejected command
    leaves both the state and the undo history untouched.
    """

    def __init__(
        self,
        repository: StateRepository,
        config: Config,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.repository = repository
        self.config = config
        self.today = today

    # data access -----------------------------------------------------
    @property
    def state(self) -> State:
        return self.repository.state

    # people ----------------------------------------------------------
    def list_people(self, search: str | None = None) -> List[Person]:
        people = list(self.state.people.values())
        if search:
            needle = search.lower()
            people = [person for person in people if needle in person.name.lower()]
        return people

    def get_person(self, person_id: int) -> Person:
        person = self.state.people.get(person_id)
        if not person:
            raise NotFoundError(f"Person not found: {person_id}")
        return person

    def add_person(self, *, name: str, color: str | None = None) -> Person:
        name = self._require_name(name, "Person")
        self.repository.push_history("person.add")
        pid = next_id(self.state.people)
        person = Person(id=pid, name=name, color=color or self.config.general.default_color)
        person.normalize()
        self.state.people[pid] = person
        logger.info("Added person %s (%d)", person.name, pid)
        return person

    def update_person(self, person_id: int, *, name: str | None = None, color: str | None = None) -> Person:
        person = self.get_person(person_id)
        if name is not None:
            name = self._require_name(name, "Person")
        self.repository.push_history("person.update")
        if name is not None:
            person.name = name
        if color is not None:
            person.color = color
        person.normalize()
        return person

    def remove_person(self, person_id: int) -> None:
        # assignments keep the id; lookups for it simply miss from now on
        person = self.get_person(person_id)
        self.repository.push_history("person.remove")
        del self.state.people[person_id]
        logger.info("Removed person %s (%d)", person.name, person_id)

    # absences ----------------------------------------------------------
    def list_absences(self, person_id: int) -> List[Absence]:
        return list(self.get_person(person_id).absences)

    def add_absence(self, person_id: int, *, start: date | str | None, end: date | str | None) -> Absence:
        person = self.get_person(person_id)
        if not start or not end:
            raise ValidationError("Both start and end dates are required.")
        start_day = parse_iso_date(start) if isinstance(start, str) else start
        end_day = parse_iso_date(end) if isinstance(end, str) else end
        if end_day < start_day:
            raise ValidationError("Invalid date range: end before start.")
        self.repository.push_history("absence.add")
        absence = Absence(start=start_day, end=end_day)
        person.absences.append(absence)
        return absence

    def remove_absence(self, person_id: int, *, index: int) -> Absence:
        person = self.get_person(person_id)
        if index < 1 or index > len(person.absences):
            raise ValidationError(f"Invalid absence index: {index}")
        self.repository.push_history("absence.remove")
        return person.absences.pop(index - 1)

    def absent_people(self, day: date) -> List[Person]:
        return [person for person in self.state.people.values() if person.is_absent(day)]

    # tasks -------------------------------------------------------------
    def list_tasks(self) -> List[Task]:
        return list(self.state.tasks)

    def get_task(self, task_id: int) -> Task:
        for task in self.state.tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(f"Task not found: {task_id}")

    def task_at(self, position: int) -> Task:
        if position < 1 or position > len(self.state.tasks):
            raise NotFoundError(f"No task at position {position}")
        return self.state.tasks[position - 1]

    def add_task(self, *, name: str, weight: int | str) -> Task:
        name = self._require_name(name, "Task")
        value = self._require_weight(weight)
        self.repository.push_history("task.add")
        task = Task(id=next_id(task.id for task in self.state.tasks), name=name, weight=value)
        task.normalize()
        self.state.tasks.append(task)
        return task

    def update_task(self, task_id: int, *, name: str | None = None, weight: int | str | None = None) -> Task:
        task = self.get_task(task_id)
        new_name = self._require_name(name, "Task") if name is not None else None
        new_weight = self._require_weight(weight) if weight is not None else None
        self.repository.push_history("task.update")
        if new_name is not None:
            task.name = new_name
        if new_weight is not None:
            task.weight = new_weight
        task.normalize()
        return task

    def update_task_at(self, position: int, *, name: str | None = None, weight: int | str | None = None) -> Task:
        return self.update_task(self.task_at(position).id, name=name, weight=weight)

    def remove_task(self, task_id: int) -> Task:
        task = self.get_task(task_id)
        self.repository.push_history("task.remove")
        self.state.tasks.remove(task)
        return task

    def remove_task_at(self, position: int) -> Task:
        return self.remove_task(self.task_at(position).id)

    # distribution ------------------------------------------------------
    def select_month(self, month: str | int) -> str:
        name = month_name(month_index(month))
        self.repository.push_history("month.select")
        self.state.selected_month = name
        return name

    def current_period(self) -> tuple[int, int]:
        """(year, month) of the selected month; the year is always the current one."""
        return self.today().year, month_index(self.state.selected_month)

    def distribute(self) -> List[CalendarAssignment]:
        year, month = self.current_period()
        self.repository.push_history("schedule.distribute")
        self.state.assignments = distribute(self.state.people, self.state.tasks, month, year)
        logger.info("Distribution for %s %d produced %d assignments", self.state.selected_month, year, len(self.state.assignments))
        return self.state.assignments

    def reset_assignments(self) -> None:
        self.repository.push_history("schedule.reset")
        self.state.assignments = []

    def list_assignments(self) -> List[dict]:
        rows: List[dict] = []
        for entry in self.state.assignments:
            person = self.state.people.get(entry.person_id)
            rows.append(
                {
                    "date": entry.date.isoformat(),
                    "task": entry.task,
                    "person_id": entry.person_id,
                    "person": person.name if person else "?",
                }
            )
        return rows

    # reporting ---------------------------------------------------------
    def person_total(self, person_id: int) -> int:
        return weight_totals(self.state.assignments, self.state.tasks).get(person_id, 0)

    def totals(self) -> List[dict]:
        totals = weight_totals(self.state.assignments, self.state.tasks)
        return [
            {"person_id": person.id, "name": person.name, "total": totals.get(person.id, 0)}
            for person in self.state.people.values()
        ]

    def calendar(self) -> List[dict]:
        year, month = self.current_period()
        locale = self.config.general.default_locale
        by_day: dict[date, List[CalendarAssignment]] = {}
        for entry in self.state.assignments:
            by_day.setdefault(entry.date, []).append(entry)
        rows: List[dict] = []
        for day in days_in_month(year, month):
            entries = []
            for entry in by_day.get(day, []):
                person = self.state.people.get(entry.person_id)
                entries.append(
                    {
                        "task": entry.task,
                        "person_id": entry.person_id,
                        "person": person.name if person else "?",
                        "color": person.color if person else "",
                    }
                )
            rows.append(
                {
                    "date": day.isoformat(),
                    "label": format_date(day, self.config.general.day_format, locale),
                    "absent": [person.name for person in self.absent_people(day)],
                    "assignments": entries,
                }
            )
        return rows

    # roster import/export ----------------------------------------------
    def export_roster(self, path: str | Path | None = None) -> Path:
        return self.repository.save(Path(path) if path else None)

    def import_roster(self, path: str | Path) -> Path:
        target = Path(path)
        self.repository.load(target, label="roster.import")
        return target

    # validation helpers ------------------------------------------------
    @staticmethod
    def _require_name(name: str | None, label: str) -> str:
        value = (name or "").strip()
        if not value:
            raise ValidationError(f"{label} name is required.")
        return value

    def _require_weight(self, weight: int | str | None) -> int:
        low, high = self.config.tasks.min_weight, self.config.tasks.max_weight
        # int() would truncate floats and accept bools
        if isinstance(weight, bool) or not isinstance(weight, (int, str)):
            raise ValidationError(f"Weight must be an integer between {low} and {high}.")
        try:
            value = int(weight)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Weight must be an integer between {low} and {high}.") from exc
        if not low <= value <= high:
            raise ValidationError(f"Weight must be an integer between {low} and {high}.")
        return value


def open_session(
    config: Config,
    *,
    roster: Path | None = None,
    today: Callable[[], date] = date.today,
) -> CoreService:
    """Build a fresh in-memory session, optionally importing a roster file."""
    initial = State.seeded() if config.general.seed_defaults else State()
    initial.selected_month = month_name(today().month)
    repository = StateRepository(
        initial,
        undo_depth=config.history.undo_depth,
        weight_range=(config.tasks.min_weight, config.tasks.max_weight),
    )
    if roster is not None:
        repository.load(roster)
    return CoreService(repository, config, today=today)
