from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple

from .errors import ConflictError, IOErrorWithCode, ValidationError
from .models import State

ROSTER_FILE_DEFAULT = Path("roster.json")


@dataclass(slots=True)
class Snapshot:
    label: str
    timestamp: datetime
    state: State


class StateRepository:
    """In-memory session state with a bounded undo history.

    Nothing is written to disk unless ``save`` is called explicitly; a new
    repository always starts from ``initial`` (or an empty state).
    """

    def __init__(
        self,
        initial: State | None = None,
        *,
        undo_depth: int = 64,
        weight_range: Tuple[int, int] = (1, 9),
    ) -> None:
        self.state: State = initial if initial is not None else State()
        self.undo_depth = undo_depth
        self.weight_range = weight_range
        self.history: List[Snapshot] = []

    def load(self, path: Path, *, label: str | None = None) -> None:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise IOErrorWithCode(f"File not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise IOErrorWithCode(f"Invalid JSON in {path}: {exc}") from exc
        try:
            state = State.from_dict(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid roster in {path}: {exc}") from exc
        if len(state.people) != len(payload.get("people", [])):
            raise ConflictError(f"Duplicate person ids in {path}")
        task_ids = [task.id for task in state.tasks]
        if len(set(task_ids)) != len(task_ids):
            raise ConflictError(f"Duplicate task ids in {path}")
        self._check_roster(state, path)
        state.selected_month = self.state.selected_month
        if label:
            self.push_history(label)
        self.state = state

    def _check_roster(self, state: State, path: Path) -> None:
        low, high = self.weight_range
        for person in state.people.values():
            if not person.name:
                raise ValidationError(f"Person {person.id} in {path} has no name.")
        for task in state.tasks:
            if not task.name:
                raise ValidationError(f"Task {task.id} in {path} has no name.")
            if not low <= task.weight <= high:
                raise ValidationError(f"Task {task.name} in {path}: weight must be between {low} and {high}.")

    def save(self, path: Path | None = None) -> Path:
        target = path or ROSTER_FILE_DEFAULT
        target.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(self.state.to_dict(), indent=2, ensure_ascii=False)
        target.write_text(data, encoding="utf-8")
        return target

    def push_history(self, label: str) -> None:
        if self.undo_depth == 0:
            return
        snapshot = Snapshot(label=label, timestamp=datetime.now(timezone.utc), state=self.state.clone())
        self.history.append(snapshot)
        if len(self.history) > self.undo_depth:
            self.history.pop(0)

    def undo(self) -> Snapshot:
        if not self.history:
            raise ValidationError("Nothing to undo.")
        snapshot = self.history.pop()
        self.state = snapshot.state.clone()
        return snapshot
