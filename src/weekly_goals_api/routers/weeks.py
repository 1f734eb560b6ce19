from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import (
    ErrorResponse,
    TaskResponse,
    WeekCreate,
    WeekResponse,
    WeekSuggestionResponse,
)
from weekly_goals_api.services import week_service

router = APIRouter(prefix="/weeks", tags=["weeks"])


@router.get("", response_model=list[WeekResponse])
async def get_weeks(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> list[WeekResponse]:
    """Get all weeks, most recent first"""
    weeks = week_service.get_weeks(session)
    return [WeekResponse.model_validate(week) for week in weeks]


@router.post(
    "",
    response_model=WeekResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Week already exists"}},
)
async def create_week(
    week_data: WeekCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> WeekResponse:
    """Create an empty week with explicit dates"""
    week = week_service.create_week(session, week_data)
    return WeekResponse.model_validate(week)


@router.get("/suggest-next", response_model=WeekSuggestionResponse)
async def suggest_next_week(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> WeekSuggestionResponse:
    """Suggest id and dates for the week after the most recent one"""
    suggestion = week_service.suggest_next_week(session)
    return WeekSuggestionResponse(**suggestion._asdict())


@router.get(
    "/{week_id}",
    response_model=WeekResponse,
    responses={404: {"model": ErrorResponse, "description": "Week not found"}},
)
async def get_week(
    week_id: str,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> WeekResponse:
    """Get specific week"""
    week = week_service.get_week(session, week_id)
    return WeekResponse.model_validate(week)


@router.delete(
    "/{week_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Week not found"}},
)
async def delete_week(
    week_id: str,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> None:
    """Delete a week and its tasks"""
    week_service.delete_week(session, week_id)


@router.get("/{week_id}/tasks", response_model=list[TaskResponse])
async def get_week_tasks(
    week_id: str,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> list[TaskResponse]:
    """Get tasks of a week"""
    tasks = week_service.get_week_tasks(session, week_id)
    return [TaskResponse.model_validate(task) for task in tasks]
