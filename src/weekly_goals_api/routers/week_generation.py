"""
New week wizard endpoints
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user
from weekly_goals_api.database import get_session
from weekly_goals_api.models import (
    BacklogItemResponse,
    ErrorResponse,
    FollowUpResponse,
    GenerationSourcesResponse,
    RecurringTaskResponse,
    TaskResponse,
    WeekGenerationRequest,
    WeekGenerationResponse,
    WeekResponse,
)
from weekly_goals_api.rate_limiter import GENERATION_RATE_LIMIT, limiter
from weekly_goals_api.week_generation import (
    collect_generation_sources,
    week_generation_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weeks-new", tags=["week-generation"])


@router.get("/data", response_model=GenerationSourcesResponse)
async def get_generation_sources(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    previous_week_id: Annotated[str | None, Query()] = None,
) -> GenerationSourcesResponse:
    """Get the recurring tasks, carry-over candidates, follow-ups and backlog"""
    sources = collect_generation_sources(session, previous_week_id)
    return GenerationSourcesResponse(
        recurring_tasks=[
            RecurringTaskResponse.model_validate(t) for t in sources.recurring_tasks
        ],
        incomplete_tasks=[
            TaskResponse.model_validate(t) for t in sources.incomplete_tasks
        ],
        follow_ups=[FollowUpResponse.model_validate(f) for f in sources.follow_ups],
        backlog_items=[
            BacklogItemResponse.model_validate(b) for b in sources.backlog_items
        ],
    )


@router.post(
    "",
    response_model=WeekGenerationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Week already exists"},
    },
)
@limiter.limit(GENERATION_RATE_LIMIT)
async def generate_week(
    request: Request,
    generation_request: WeekGenerationRequest,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> WeekGenerationResponse:
    """Create a new week from the selected sources"""
    logger.info(
        f"Generating week {generation_request.week_id} for {current_user.email}"
    )
    result = week_generation_service.generate_week(session, generation_request)
    return WeekGenerationResponse(
        week=WeekResponse.model_validate(result.week),
        tasks=[TaskResponse.model_validate(task) for task in result.tasks],
    )
