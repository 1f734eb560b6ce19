"""
Backlog endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import (
    BacklogItemCreate,
    BacklogItemResponse,
    BacklogItemUpdate,
    ErrorResponse,
    MoveToWeekRequest,
    NoteResponse,
    TaskResponse,
)
from weekly_goals_api.services import backlog_service

router = APIRouter(prefix="/backlog", tags=["backlog"])


@router.get("", response_model=list[BacklogItemResponse])
async def get_backlog_items(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> list[BacklogItemResponse]:
    """Get backlog items, highest priority first"""
    items = backlog_service.get_backlog_items(session)
    return [BacklogItemResponse.model_validate(item) for item in items]


@router.post(
    "", response_model=BacklogItemResponse, status_code=status.HTTP_201_CREATED
)
async def create_backlog_item(
    item_data: BacklogItemCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> BacklogItemResponse:
    item = backlog_service.create_backlog_item(session, item_data)
    return BacklogItemResponse.model_validate(item)


@router.get(
    "/{item_id}",
    response_model=BacklogItemResponse,
    responses={404: {"model": ErrorResponse, "description": "Backlog item not found"}},
)
async def get_backlog_item(
    item_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> BacklogItemResponse:
    item = backlog_service.get_backlog_item(session, item_id)
    return BacklogItemResponse.model_validate(item)


@router.put(
    "/{item_id}",
    response_model=BacklogItemResponse,
    responses={404: {"model": ErrorResponse, "description": "Backlog item not found"}},
)
async def update_backlog_item(
    item_id: int,
    item_data: BacklogItemUpdate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> BacklogItemResponse:
    item = backlog_service.update_backlog_item(session, item_id, item_data)
    return BacklogItemResponse.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_backlog_item(
    item_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> None:
    backlog_service.delete_backlog_item(session, item_id)


@router.post(
    "/{item_id}/to-week",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse, "description": "Item or week not found"}},
)
async def move_backlog_item_to_week(
    item_id: int,
    move_request: MoveToWeekRequest,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> TaskResponse:
    """Plan a backlog item into an existing week"""
    task = backlog_service.move_to_week(session, item_id, move_request.week_id)
    return TaskResponse.model_validate(task)


@router.get("/{item_id}/notes", response_model=list[NoteResponse])
async def get_backlog_item_notes(
    item_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> list[NoteResponse]:
    notes = backlog_service.get_backlog_item_notes(session, item_id)
    return [NoteResponse.model_validate(note) for note in notes]
