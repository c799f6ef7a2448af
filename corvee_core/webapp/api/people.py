from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ... import errors
from ...models import Person
from ..container import ServiceContainer
from ..dependencies import get_container
from ..schemas import AbsenceIn, AbsenceOut, Message, PersonCreate, PersonOut, PersonUpdate

router = APIRouter()


def _person_to_schema(person: Person) -> PersonOut:
    return PersonOut(
        id=person.id,
        name=person.name,
        color=person.color,
        absences=[
            AbsenceOut(index=idx, start=block.start, end=block.end)
            for idx, block in enumerate(person.absences, start=1)
        ],
    )


def _http_error(exc: errors.ValidationError) -> HTTPException:
    code = 404 if isinstance(exc, errors.NotFoundError) else 400
    return HTTPException(status_code=code, detail=str(exc))


@router.get("/", response_model=List[PersonOut])
def list_people(
    container: ServiceContainer = Depends(get_container),
    search: Optional[str] = Query(default=None),
) -> List[PersonOut]:
    people = container.read(container.service.list_people, search)
    return [_person_to_schema(person) for person in people]


@router.post("/", response_model=PersonOut, status_code=status.HTTP_201_CREATED)
def create_person(payload: PersonCreate, container: ServiceContainer = Depends(get_container)) -> PersonOut:
    try:
        person = container.mutate(container.service.add_person, name=payload.name, color=payload.color)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return _person_to_schema(person)


@router.get("/{person_id}", response_model=PersonOut)
def get_person(person_id: int, container: ServiceContainer = Depends(get_container)) -> PersonOut:
    try:
        person = container.read(container.service.get_person, person_id)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return _person_to_schema(person)


@router.put("/{person_id}", response_model=PersonOut)
def update_person(person_id: int, payload: PersonUpdate, container: ServiceContainer = Depends(get_container)) -> PersonOut:
    data = payload.model_dump(exclude_unset=True)
    try:
        person = container.mutate(container.service.update_person, person_id, **data)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return _person_to_schema(person)


@router.delete("/{person_id}", response_model=Message)
def remove_person(person_id: int, container: ServiceContainer = Depends(get_container)) -> Message:
    try:
        container.mutate(container.service.remove_person, person_id)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return Message(detail=container.localizer.text("person.removed"))


@router.get("/{person_id}/absences", response_model=List[AbsenceOut])
def list_absences(person_id: int, container: ServiceContainer = Depends(get_container)) -> List[AbsenceOut]:
    try:
        blocks = container.read(container.service.list_absences, person_id)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return [AbsenceOut(index=idx, start=block.start, end=block.end) for idx, block in enumerate(blocks, start=1)]


@router.post("/{person_id}/absences", response_model=Message, status_code=status.HTTP_201_CREATED)
def add_absence(person_id: int, payload: AbsenceIn, container: ServiceContainer = Depends(get_container)) -> Message:
    try:
        container.mutate(container.service.add_absence, person_id, start=payload.start, end=payload.end)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return Message(detail=container.localizer.text("absence.added"))


@router.delete("/{person_id}/absences", response_model=Message)
def remove_absence(
    person_id: int,
    *,
    index: int = Query(..., ge=1),
    container: ServiceContainer = Depends(get_container),
) -> Message:
    try:
        container.mutate(container.service.remove_absence, person_id, index=index)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return Message(detail=container.localizer.text("absence.removed"))
