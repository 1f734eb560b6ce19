from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ErrorResponse,
)
from weekly_goals_api.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def get_categories(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> list[CategoryResponse]:
    categories = category_service.get_categories(session)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> CategoryResponse:
    category = category_service.create_category(session, category_data)
    return CategoryResponse.model_validate(category)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse, "description": "Category not found"}},
)
async def get_category(
    category_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> CategoryResponse:
    category = category_service.get_category(session, category_id)
    return CategoryResponse.model_validate(category)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse, "description": "Category not found"}},
)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> CategoryResponse:
    category = category_service.update_category(session, category_id, category_data)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> None:
    """Delete a category; items referencing it keep no category"""
    category_service.delete_category(session, category_id)
