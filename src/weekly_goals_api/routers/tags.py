from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import ErrorResponse, TagCreate, TagResponse
from weekly_goals_api.services import tag_service

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagResponse])
async def get_tags(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    category_id: Annotated[int | None, Query()] = None,
) -> list[TagResponse]:
    """Get tags, optionally filtered by category"""
    tags = tag_service.get_tags(session, category_id)
    return [TagResponse.model_validate(tag) for tag in tags]


@router.post(
    "",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse, "description": "Category not found"}},
)
async def create_tag(
    tag_data: TagCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> TagResponse:
    tag = tag_service.create_tag(session, tag_data)
    return TagResponse.model_validate(tag)


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Tag not found"}},
)
async def delete_tag(
    tag_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> None:
    tag_service.delete_tag(session, tag_id)
