"""
Tests for service error mapping and transactional execution
"""

from datetime import date
from unittest.mock import MagicMock

import pytest
from fastapi import status
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session

from weekly_goals_api.common.error_handlers import (
    AuthorizationError,
    DuplicateWeekError,
    ResourceNotFoundError,
    StorageError,
    ValidationError,
    handle_service_error,
    require_text,
    safe_execute,
)
from weekly_goals_api.models import Week


@pytest.mark.parametrize(
    "error, status_code, code",
    [
        (ResourceNotFoundError("Task", 1), status.HTTP_404_NOT_FOUND, "RESOURCE_NOT_FOUND"),
        (ValidationError("bad", "title"), status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR"),
        (DuplicateWeekError("2026-05"), status.HTTP_409_CONFLICT, "DUPLICATE_WEEK"),
        (AuthorizationError(), status.HTTP_401_UNAUTHORIZED, "AUTHORIZATION_ERROR"),
        (StorageError("disk"), status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_ERROR"),
        (RuntimeError("boom"), status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR"),
    ],
)
def test_handle_service_error_status_codes(error, status_code, code):
    http_exc = handle_service_error(error)

    assert http_exc.status_code == status_code
    assert http_exc.detail["error"]["code"] == code


def test_handle_service_error_details():
    validation = handle_service_error(ValidationError("title is required", "title"))
    duplicate = handle_service_error(DuplicateWeekError("2026-05"))
    storage = handle_service_error(StorageError("connection reset"))

    assert validation.detail["error"]["details"] == {"field": "title"}
    assert duplicate.detail["error"]["details"] == {"week_id": "2026-05"}
    assert duplicate.detail["error"]["message"] == "Week 2026-05 already exists"
    # Storage failures do not leak database messages
    assert storage.detail["error"]["message"] == "Internal server error"


def test_safe_execute_commits(session: Session):
    def operation():
        week = Week(id="2026-05", start_date=date(2026, 1, 26), end_date=date(2026, 2, 1))
        session.add(week)
        return week

    safe_execute(session, operation)
    session.rollback()

    assert session.get(Week, "2026-05") is not None


def test_safe_execute_rolls_back_service_errors(session: Session):
    def operation():
        session.add(
            Week(id="2026-05", start_date=date(2026, 1, 26), end_date=date(2026, 2, 1))
        )
        session.flush()
        raise ValidationError("nope")

    with pytest.raises(ValidationError):
        safe_execute(session, operation)

    assert session.get(Week, "2026-05") is None


def test_safe_execute_wraps_database_errors():
    session = MagicMock()

    def integrity_failure():
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    def storage_failure():
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    with pytest.raises(StorageError):
        safe_execute(session, integrity_failure)
    with pytest.raises(StorageError):
        safe_execute(session, storage_failure)

    assert session.rollback.call_count == 2
    session.commit.assert_not_called()


def test_safe_execute_without_rollback():
    session = MagicMock()

    def failure():
        raise ResourceNotFoundError("Week", "2026-05")

    with pytest.raises(ResourceNotFoundError):
        safe_execute(session, failure, rollback_on_error=False)

    session.rollback.assert_not_called()


def test_require_text():
    assert require_text("ok", "title") == "ok"
    for value in (None, "", "   "):
        with pytest.raises(ValidationError) as exc_info:
            require_text(value, "title")
        assert exc_info.value.field == "title"
