from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import ErrorResponse, FollowUpCreate, FollowUpResponse
from weekly_goals_api.services import follow_up_service

router = APIRouter(prefix="/follow-ups", tags=["follow-ups"])


@router.get("", response_model=list[FollowUpResponse])
async def get_follow_ups(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> list[FollowUpResponse]:
    follow_ups = follow_up_service.get_follow_ups(session)
    return [FollowUpResponse.model_validate(f) for f in follow_ups]


@router.post(
    "",
    response_model=FollowUpResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse, "description": "Source task not found"}},
)
async def create_follow_up(
    follow_up_data: FollowUpCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> FollowUpResponse:
    """Record a follow-up for a task, to be offered when the next week is created"""
    follow_up = follow_up_service.create_follow_up(session, follow_up_data)
    return FollowUpResponse.model_validate(follow_up)


@router.get(
    "/{follow_up_id}",
    response_model=FollowUpResponse,
    responses={404: {"model": ErrorResponse, "description": "Follow-up not found"}},
)
async def get_follow_up(
    follow_up_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> FollowUpResponse:
    follow_up = follow_up_service.get_follow_up(session, follow_up_id)
    return FollowUpResponse.model_validate(follow_up)


@router.delete("/{follow_up_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_follow_up(
    follow_up_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> None:
    follow_up_service.delete_follow_up(session, follow_up_id)
