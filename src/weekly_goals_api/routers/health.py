"""
Weight tracker endpoints
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from weekly_goals_api.auth import AuthUser, get_current_user, require_webhook_key
from weekly_goals_api.database import get_session
from weekly_goals_api.health_service import DEFAULT_HISTORY_DAYS, health_service
from weekly_goals_api.models import (
    ErrorResponse,
    HealthSyncPayload,
    HealthSyncResponse,
    WeightEntryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health-weight", response_model=list[WeightEntryResponse])
async def get_weight_entries(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    days: Annotated[int, Query()] = DEFAULT_HISTORY_DAYS,
) -> list[WeightEntryResponse]:
    """Get weight history, newest first; days <= 0 returns everything"""
    entries = health_service.get_weight_entries(session, days)
    return [WeightEntryResponse.model_validate(entry) for entry in entries]


@router.post(
    "/health-sync",
    response_model=HealthSyncResponse,
    dependencies=[Depends(require_webhook_key)],
    responses={
        400: {"model": ErrorResponse, "description": "No metrics in payload"},
        401: {"model": ErrorResponse, "description": "Missing or wrong API key"},
    },
)
async def sync_health_data(
    payload: HealthSyncPayload,
    session: Annotated[Session, Depends(get_session)],
) -> HealthSyncResponse:
    """Receive a health app export and upsert daily weight entries"""
    return health_service.sync_health_data(session, payload)
