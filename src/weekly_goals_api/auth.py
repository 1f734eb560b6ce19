"""
Request authentication.

The identity proxy in front of the API forwards the signed-in user as
``x-user-id`` / ``x-user-email`` headers. A caller is allowed when both are
present and the email is approved, either in the ``approved_users`` table or
in the ``APPROVED_EMAILS`` setting.

The health export webhook has no signed-in user; it presents the
``HEALTH_SYNC_API_KEY`` setting as a bearer token instead.
"""

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session, select

from weekly_goals_api.common.error_handlers import AuthorizationError
from weekly_goals_api.config import settings
from weekly_goals_api.database import get_session
from weekly_goals_api.models import ApprovedUser

logger = logging.getLogger(__name__)


class AuthUser:
    """Authenticated user information"""

    def __init__(self, user_id: str, email: str):
        self.user_id = user_id
        self.email = email


def is_approved_user(session: Session, email: str) -> bool:
    """Check the email against configured and stored approvals"""
    normalized = email.strip().lower()
    if normalized in settings.approved_emails_list:
        return True
    statement = select(ApprovedUser).where(ApprovedUser.email == normalized).limit(1)
    return session.exec(statement).first() is not None


async def get_current_user(
    session: Annotated[Session, Depends(get_session)],
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_email: Annotated[str | None, Header()] = None,
) -> AuthUser:
    """Resolve the calling user from identity headers"""
    if not x_user_id or not x_user_email:
        raise AuthorizationError()

    if not is_approved_user(session, x_user_email):
        logger.warning(f"🔒 Rejected unapproved user: {x_user_email}")
        raise AuthorizationError()

    return AuthUser(user_id=x_user_id, email=x_user_email)


async def require_webhook_key(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(HTTPBearer(auto_error=False))
    ],
) -> None:
    """Accept only requests bearing the configured webhook key"""
    expected = settings.health_sync_api_key
    if not expected:
        logger.warning("🔒 Health sync called but HEALTH_SYNC_API_KEY is not set")
        raise AuthorizationError()
    if credentials is None or not hmac.compare_digest(
        credentials.credentials, expected
    ):
        raise AuthorizationError()
