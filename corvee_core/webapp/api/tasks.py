from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ... import errors
from ...models import Task
from ..container import ServiceContainer
from ..dependencies import get_container
from ..schemas import Message, TaskCreate, TaskOut, TaskUpdate

router = APIRouter()


def _task_to_schema(task: Task, position: int) -> TaskOut:
    return TaskOut(id=task.id, position=position, name=task.name, weight=task.weight)


def _position(container: ServiceContainer, task: Task) -> int:
    return next(idx for idx, item in enumerate(container.service.state.tasks, start=1) if item.id == task.id)


def _http_error(exc: errors.ValidationError) -> HTTPException:
    code = 404 if isinstance(exc, errors.NotFoundError) else 400
    return HTTPException(status_code=code, detail=str(exc))


@router.get("/", response_model=List[TaskOut])
def list_tasks(container: ServiceContainer = Depends(get_container)) -> List[TaskOut]:
    tasks = container.read(container.service.list_tasks)
    return [_task_to_schema(task, idx) for idx, task in enumerate(tasks, start=1)]


@router.post("/", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(payload: TaskCreate, container: ServiceContainer = Depends(get_container)) -> TaskOut:
    try:
        task = container.mutate(container.service.add_task, name=payload.name, weight=payload.weight)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return container.read(lambda: _task_to_schema(task, _position(container, task)))


@router.put("/{task_id}", response_model=TaskOut)
def update_task(task_id: int, payload: TaskUpdate, container: ServiceContainer = Depends(get_container)) -> TaskOut:
    data = payload.model_dump(exclude_unset=True)
    try:
        task = container.mutate(container.service.update_task, task_id, **data)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return container.read(lambda: _task_to_schema(task, _position(container, task)))


@router.delete("/{task_id}", response_model=Message)
def remove_task(task_id: int, container: ServiceContainer = Depends(get_container)) -> Message:
    try:
        container.mutate(container.service.remove_task, task_id)
    except errors.ValidationError as exc:
        raise _http_error(exc) from exc
    return Message(detail=container.localizer.text("task.removed"))
