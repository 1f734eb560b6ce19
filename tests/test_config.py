"""Tests for settings parsing"""

import pytest
from pydantic import ValidationError

from weekly_goals_api.config import Settings


def test_comma_separated_lists():
    settings = Settings(
        approved_emails=" Me@Example.com, you@example.com ,",
        cors_origins="http://a.test,http://b.test",
    )

    assert settings.approved_emails_list == ["me@example.com", "you@example.com"]
    assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


def test_postgres_url_accepted():
    settings = Settings(database_url="postgresql://user:pw@localhost:5432/goals")

    assert settings.database_url.startswith("postgresql://")


@pytest.mark.parametrize("url", ["mysql://localhost/goals", "not-a-url"])
def test_unsupported_database_url_rejected(url):
    with pytest.raises(ValidationError):
        Settings(database_url=url)


def test_sqlite_rejected_in_production(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")

    with pytest.raises(ValidationError):
        Settings(database_url="sqlite:///./weekly_goals.db")


def test_environment_must_be_known():
    with pytest.raises(ValidationError):
        Settings(environment="qa")
