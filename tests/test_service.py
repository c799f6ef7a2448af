from __future__ import annotations

import json
from datetime import date

import pytest

from corvee_core.config import Config
from corvee_core.errors import IOErrorWithCode, NotFoundError, ValidationError
from corvee_core.service import CoreService, open_session


def test_person_ids_follow_current_maximum(empty_service: CoreService) -> None:
    first = empty_service.add_person(name="Alice")
    second = empty_service.add_person(name="Bob")
    assert (first.id, second.id) == (1, 2)

    empty_service.remove_person(1)
    assert empty_service.add_person(name="Charlie").id == 3

    for person in list(empty_service.list_people()):
        empty_service.remove_person(person.id)
    assert empty_service.add_person(name="Dana").id == 1


def test_new_people_get_default_color_and_trimmed_name(empty_service: CoreService) -> None:
    person = empty_service.add_person(name="  Eve  ")
    assert person.name == "Eve"
    assert person.color == "has-background-grey-light"
    assert person.absences == []


def test_rejected_input_leaves_state_and_history_unchanged(seeded_service: CoreService) -> None:
    before = seeded_service.state.to_dict()
    history = len(seeded_service.repository.history)

    with pytest.raises(ValidationError):
        seeded_service.add_person(name="   ")
    with pytest.raises(ValidationError):
        seeded_service.add_task(name="Courses", weight=10)
    with pytest.raises(ValidationError):
        seeded_service.add_task(name="", weight=3)
    with pytest.raises(ValidationError):
        seeded_service.add_absence(1, start="2025-02-10", end="2025-02-01")
    with pytest.raises(ValidationError):
        seeded_service.add_absence(1, start="2025-02-10", end=None)

    assert seeded_service.state.to_dict() == before
    assert len(seeded_service.repository.history) == history


@pytest.mark.parametrize("weight", [0, 10, "abc", None, 3.7, True])
def test_task_weight_must_be_within_bounds(empty_service: CoreService, weight) -> None:
    with pytest.raises(ValidationError):
        empty_service.add_task(name="Courses", weight=weight)


def test_task_weight_bounds_come_from_config() -> None:
    config = Config()
    config.tasks.max_weight = 12
    service = open_session(config, today=lambda: date(2025, 2, 10))
    assert service.add_task(name="Jardin", weight="12").weight == 12


def test_duplicate_task_names_are_allowed_and_ids_stay_stable(empty_service: CoreService) -> None:
    first = empty_service.add_task(name="Sol", weight=1)
    second = empty_service.add_task(name="Sol", weight=3)
    third = empty_service.add_task(name="Vitres", weight=2)
    assert [task.id for task in empty_service.list_tasks()] == [1, 2, 3]

    empty_service.remove_task(first.id)
    assert empty_service.get_task(third.id).name == "Vitres"
    assert empty_service.task_at(1) is second

    empty_service.update_task_at(2, weight=5)
    assert empty_service.get_task(third.id).weight == 5

    empty_service.remove_task_at(1)
    assert [task.name for task in empty_service.list_tasks()] == ["Vitres"]
    with pytest.raises(NotFoundError):
        empty_service.get_task(second.id)
    with pytest.raises(NotFoundError):
        empty_service.task_at(4)


def test_absences_are_added_and_removed_by_position(seeded_service: CoreService) -> None:
    seeded_service.add_absence(2, start="2025-02-10", end="2025-02-12")
    seeded_service.add_absence(2, start=date(2025, 2, 1), end=date(2025, 2, 1))

    blocks = seeded_service.list_absences(2)
    assert [(block.start.day, block.end.day) for block in blocks] == [(10, 12), (1, 1)]
    assert [person.name for person in seeded_service.absent_people(date(2025, 2, 11))] == ["Bob"]

    removed = seeded_service.remove_absence(2, index=1)
    assert removed.start == date(2025, 2, 10)
    assert len(seeded_service.list_absences(2)) == 1

    with pytest.raises(ValidationError):
        seeded_service.remove_absence(2, index=2)
    with pytest.raises(NotFoundError):
        seeded_service.add_absence(99, start="2025-02-01", end="2025-02-02")


def test_search_is_case_insensitive_substring(seeded_service: CoreService) -> None:
    assert [person.name for person in seeded_service.list_people("AR")] == ["Charlie"]
    assert [person.name for person in seeded_service.list_people("b")] == ["Bob"]
    assert len(seeded_service.list_people("")) == 3


def test_select_month_accepts_names_and_numbers(seeded_service: CoreService) -> None:
    assert seeded_service.select_month("march") == "March"
    assert seeded_service.select_month("11") == "November"
    assert seeded_service.select_month(1) == "January"
    with pytest.raises(ValidationError):
        seeded_service.select_month("Brumaire")
    with pytest.raises(ValidationError):
        seeded_service.select_month(13)
    assert seeded_service.state.selected_month == "January"


def test_distribution_always_uses_the_current_year(config: Config) -> None:
    service = open_session(config, today=lambda: date(2024, 7, 1))
    service.select_month("February")

    assignments = service.distribute()

    assert {entry.date.year for entry in assignments} == {2024}
    assert {entry.date.month for entry in assignments} == {2}
    assert len({entry.date for entry in assignments}) == 29
    assert service.current_period() == (2024, 2)


def test_distribution_replaces_previous_assignments(seeded_service: CoreService) -> None:
    first = list(seeded_service.distribute())
    seeded_service.select_month("April")
    second = seeded_service.distribute()

    assert len(first) == 28 * 3
    assert len(second) == 30 * 3
    assert seeded_service.state.assignments == second

    seeded_service.reset_assignments()
    assert seeded_service.state.assignments == []


def test_totals_follow_live_task_weights(seeded_service: CoreService) -> None:
    seeded_service.distribute()
    before = {row["name"]: row["total"] for row in seeded_service.totals()}
    assert sum(before.values()) == 28 * (1 + 2 + 4)

    sol_count = sum(1 for entry in seeded_service.state.assignments if entry.task == "Sol")
    seeded_service.update_task(1, weight=3)
    after = {row["name"]: row["total"] for row in seeded_service.totals()}
    assert sum(after.values()) == sum(before.values()) + 2 * sol_count

    seeded_service.update_task(3, name="Linge")
    renamed = sum(row["total"] for row in seeded_service.totals())
    assert renamed == sum(after.values()) - 4 * 28


def test_removed_person_leaves_orphaned_assignments(seeded_service: CoreService) -> None:
    seeded_service.distribute()
    alice_entries = [entry for entry in seeded_service.state.assignments if entry.person_id == 1]
    alice_total = seeded_service.person_total(1)

    seeded_service.remove_person(1)

    assert alice_entries and alice_total > 0
    assert seeded_service.person_total(1) == alice_total
    assert 1 not in [row["person_id"] for row in seeded_service.totals()]
    orphans = [row for row in seeded_service.list_assignments() if row["person_id"] == 1]
    assert orphans and {row["person"] for row in orphans} == {"?"}

    seeded_service.distribute()
    assert all(entry.person_id != 1 for entry in seeded_service.state.assignments)


def test_calendar_lists_absent_people_and_labels_days(seeded_service: CoreService) -> None:
    seeded_service.add_absence(3, start="2025-02-01", end="2025-02-02")
    seeded_service.distribute()

    days = seeded_service.calendar()

    assert len(days) == 28
    first = days[0]
    assert first["date"] == "2025-02-01"
    assert first["label"] == "sam. 01 févr."
    assert first["absent"] == ["Charlie"]
    assert {entry["person"] for entry in first["assignments"]} <= {"Alice", "Bob"}
    assert first["assignments"][0]["color"] == "has-background-danger-light"


def test_undo_restores_previous_state(seeded_service: CoreService) -> None:
    seeded_service.add_person(name="Dana")
    seeded_service.remove_task(2)

    assert seeded_service.repository.undo().label == "task.remove"
    assert [task.name for task in seeded_service.list_tasks()] == ["Sol", "Vaisselle", "Lessives"]
    assert seeded_service.repository.undo().label == "person.add"
    assert len(seeded_service.list_people()) == 3
    with pytest.raises(ValidationError):
        seeded_service.repository.undo()


def test_open_session_seeds_default_roster(config: Config) -> None:
    service = open_session(config, today=lambda: date(2025, 9, 3))

    assert [(person.id, person.name) for person in service.list_people()] == [(1, "Alice"), (2, "Bob"), (3, "Charlie")]
    assert [(task.name, task.weight) for task in service.list_tasks()] == [("Sol", 1), ("Vaisselle", 2), ("Lessives", 4)]
    assert service.state.selected_month == "September"


def test_open_session_can_start_empty() -> None:
    config = Config()
    config.general.seed_defaults = False
    service = open_session(config, today=lambda: date(2025, 9, 3))
    assert service.list_people() == []
    assert service.distribute() == []


def test_roster_export_and_import(seeded_service: CoreService, tmp_path) -> None:
    seeded_service.add_absence(1, start="2025-02-03", end="2025-02-04")
    target = seeded_service.export_roster(tmp_path / "roster.json")

    other = open_session(Config(), roster=target, today=lambda: date(2025, 2, 10))

    assert other.state.to_dict() == seeded_service.state.to_dict()
    assert other.get_person(1).absences[0].end == date(2025, 2, 4)


def test_failed_import_keeps_session(seeded_service: CoreService, tmp_path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    history = len(seeded_service.repository.history)

    with pytest.raises(IOErrorWithCode):
        seeded_service.import_roster(broken)
    with pytest.raises(IOErrorWithCode):
        seeded_service.import_roster(tmp_path / "missing.json")

    assert len(seeded_service.list_people()) == 3
    assert len(seeded_service.repository.history) == history


@pytest.mark.parametrize(
    "roster",
    [
        {"people": [{"id": 1, "name": "   "}], "tasks": []},
        {"people": [], "tasks": [{"id": 1, "name": "", "weight": 2}]},
        {"people": [], "tasks": [{"id": 1, "name": "Sol", "weight": -7}]},
        {"people": [], "tasks": [{"id": 1, "name": "Big", "weight": 500}]},
    ],
)
def test_import_rejects_invalid_roster(seeded_service: CoreService, tmp_path, roster: dict) -> None:
    path = tmp_path / "roster.json"
    path.write_text(json.dumps(roster), encoding="utf-8")
    before = seeded_service.state.to_dict()
    history = len(seeded_service.repository.history)

    with pytest.raises(ValidationError):
        seeded_service.import_roster(path)
    with pytest.raises(ValidationError):
        open_session(Config(), roster=path)

    assert seeded_service.state.to_dict() == before
    assert len(seeded_service.repository.history) == history


def test_import_uses_configured_weight_bounds(tmp_path) -> None:
    path = tmp_path / "roster.json"
    path.write_text(json.dumps({"people": [], "tasks": [{"id": 1, "name": "Sol", "weight": 12}]}), encoding="utf-8")
    config = Config()
    config.tasks.max_weight = 12

    service = open_session(config, roster=path)

    assert [(task.name, task.weight) for task in service.list_tasks()] == [("Sol", 12)]
