from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import (
    BacklogItemResponse,
    ErrorResponse,
    NoteResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from weekly_goals_api.services import task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def get_tasks(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    week_id: Annotated[str | None, Query()] = None,
) -> list[TaskResponse]:
    """Get tasks, optionally limited to one week"""
    tasks = task_service.get_tasks(session, week_id=week_id)
    return [TaskResponse.model_validate(task) for task in tasks]


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse, "description": "Week not found"}},
)
async def create_task(
    task_data: TaskCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> TaskResponse:
    """Create a task in an existing week"""
    task = task_service.create_task(session, task_data)
    return TaskResponse.model_validate(task)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
async def get_task(
    task_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> TaskResponse:
    task = task_service.get_task(session, task_id)
    return TaskResponse.model_validate(task)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
async def update_task(
    task_id: int,
    task_data: TaskUpdate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> TaskResponse:
    task = task_service.update_task(session, task_id, task_data)
    return TaskResponse.model_validate(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
async def delete_task(
    task_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> None:
    task_service.delete_task(session, task_id)


@router.post("/{task_id}/toggle", response_model=TaskResponse)
async def toggle_task(
    task_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> TaskResponse:
    """Flip a task between pending and completed"""
    task = task_service.toggle_status(session, task_id)
    return TaskResponse.model_validate(task)


@router.post(
    "/{task_id}/to-backlog",
    response_model=BacklogItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def move_task_to_backlog(
    task_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> BacklogItemResponse:
    """Move a task out of its week into the backlog, keeping its notes"""
    item = task_service.move_to_backlog(session, task_id)
    return BacklogItemResponse.model_validate(item)


@router.get("/{task_id}/notes", response_model=list[NoteResponse])
async def get_task_notes(
    task_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> list[NoteResponse]:
    notes = task_service.get_task_notes(session, task_id)
    return [NoteResponse.model_validate(note) for note in notes]
