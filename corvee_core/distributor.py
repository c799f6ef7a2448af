from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping, Sequence

from .models import CalendarAssignment, Person, Task
from .utils import covered_by_any, days_in_month

logger = logging.getLogger(__name__)


def available_people(people: Iterable[Person], day: date) -> List[Person]:
    return [person for person in people if not covered_by_any(day, person.absences)]


def distribute(
    people: Mapping[int, Person],
    tasks: Sequence[Task],
    month: int,
    year: int,
) -> List[CalendarAssignment]:
    """Assign every task to one available person on each day of the month.

    Each day, available people are ordered by the weight they have already
    received during this run (lightest first, registry order on ties) and the
    catalog is ordered heaviest first (catalog order on ties). Task ``idx``
    goes to ``available[idx % len(available)]``. A day on which everybody is
    absent yields no assignments; its tasks are dropped, not carried over.

    The load counter starts at zero on every call, so the result depends only
    on the arguments.
    """
    occurrences: Dict[int, int] = {pid: 0 for pid in people}
    assignments: List[CalendarAssignment] = []
    skipped = 0

    for day in days_in_month(year, month):
        present = available_people(people.values(), day)
        if not present:
            skipped += 1
            continue
        # sorted() is stable, ties keep registry and catalog order
        ranked_people = sorted(present, key=lambda person: occurrences[person.id])
        ranked_tasks = sorted(tasks, key=lambda task: -task.weight)
        for idx, task in enumerate(ranked_tasks):
            assignee = ranked_people[idx % len(ranked_people)]
            occurrences[assignee.id] += task.weight
            assignments.append(CalendarAssignment(date=day, person_id=assignee.id, task=task.name))

    logger.debug(
        "Distributed %d assignments for %04d-%02d (%d people, %d tasks, %d days without anyone)",
        len(assignments),
        year,
        month,
        len(people),
        len(tasks),
        skipped,
    )
    return assignments


def weight_totals(
    assignments: Iterable[CalendarAssignment],
    tasks: Sequence[Task],
) -> Dict[int, int]:
    """Sum weights per person, resolving task names against the given catalog.

    Names missing from the catalog contribute nothing; with duplicate names the
    first task in catalog order wins.
    """
    weights: Dict[str, int] = {}
    for task in tasks:
        weights.setdefault(task.name, task.weight)
    totals: Dict[int, int] = {}
    for entry in assignments:
        totals[entry.person_id] = totals.get(entry.person_id, 0) + weights.get(entry.task, 0)
    return totals
