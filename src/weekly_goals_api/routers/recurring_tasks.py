"""
Recurring task template endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import (
    ErrorResponse,
    RecurringTaskCreate,
    RecurringTaskResponse,
    RecurringTaskUpdate,
)
from weekly_goals_api.services import recurring_task_service

router = APIRouter(prefix="/recurring-tasks", tags=["recurring-tasks"])


@router.get("", response_model=list[RecurringTaskResponse])
async def get_recurring_tasks(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    is_active: Annotated[bool | None, Query()] = None,
) -> list[RecurringTaskResponse]:
    """Get recurring task templates"""
    templates = recurring_task_service.get_recurring_tasks(session, is_active=is_active)
    return [RecurringTaskResponse.model_validate(t) for t in templates]


@router.post(
    "", response_model=RecurringTaskResponse, status_code=status.HTTP_201_CREATED
)
async def create_recurring_task(
    task_data: RecurringTaskCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> RecurringTaskResponse:
    template = recurring_task_service.create_recurring_task(session, task_data)
    return RecurringTaskResponse.model_validate(template)


@router.get(
    "/{task_id}",
    response_model=RecurringTaskResponse,
    responses={404: {"model": ErrorResponse, "description": "Template not found"}},
)
async def get_recurring_task(
    task_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> RecurringTaskResponse:
    template = recurring_task_service.get_recurring_task(session, task_id)
    return RecurringTaskResponse.model_validate(template)


@router.put(
    "/{task_id}",
    response_model=RecurringTaskResponse,
    responses={404: {"model": ErrorResponse, "description": "Template not found"}},
)
async def update_recurring_task(
    task_id: int,
    task_data: RecurringTaskUpdate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> RecurringTaskResponse:
    template = recurring_task_service.update_recurring_task(session, task_id, task_data)
    return RecurringTaskResponse.model_validate(template)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurring_task(
    task_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> None:
    recurring_task_service.delete_recurring_task(session, task_id)


@router.post("/{task_id}/toggle", response_model=RecurringTaskResponse)
async def toggle_recurring_task(
    task_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> RecurringTaskResponse:
    """Activate or deactivate a template"""
    template = recurring_task_service.toggle_active(session, task_id)
    return RecurringTaskResponse.model_validate(template)
