"""
Note endpoints

A note belongs to exactly one task or backlog item.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import ErrorResponse, NoteCreate, NoteResponse, NoteUpdate
from weekly_goals_api.services import note_service

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=list[NoteResponse])
async def get_notes(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    task_id: Annotated[int | None, Query()] = None,
    backlog_item_id: Annotated[int | None, Query()] = None,
) -> list[NoteResponse]:
    notes = note_service.get_notes(
        session, task_id=task_id, backlog_item_id=backlog_item_id
    )
    return [NoteResponse.model_validate(note) for note in notes]


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Owner missing or ambiguous"},
        404: {"model": ErrorResponse, "description": "Owner not found"},
    },
)
async def create_note(
    note_data: NoteCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> NoteResponse:
    note = note_service.create_note(session, note_data)
    return NoteResponse.model_validate(note)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={404: {"model": ErrorResponse, "description": "Note not found"}},
)
async def get_note(
    note_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> NoteResponse:
    note = note_service.get_note(session, note_id)
    return NoteResponse.model_validate(note)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: int,
    note_data: NoteUpdate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> NoteResponse:
    note = note_service.update_note(session, note_id, note_data)
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> None:
    note_service.delete_note(session, note_id)
