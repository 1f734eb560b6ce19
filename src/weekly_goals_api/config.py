import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # API Configuration
    api_title: str = "Weekly Goals API"
    api_version: str = "0.1.0"
    api_description: str = (
        "Weekly task planning with backlog, recurring tasks and follow-ups"
    )

    # Server Configuration
    host: str = "0.0.0.0"  # nosec B104
    port: int = 8000
    debug: bool = False

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./weekly_goals.db",
        description="SQLAlchemy database URL (PostgreSQL in production)",
    )

    # Auth Configuration
    approved_emails: list[str] | str = Field(
        default_factory=list,
        description="Emails allowed to use the API in addition to approved_users rows",
    )

    # Health export webhook
    health_sync_api_key: str | None = Field(
        default=None,
        description="Bearer key the health export webhook must present",
    )

    # Environment
    environment: str = Field(
        default="development", pattern="^(development|staging|production|test)$"
    )

    # CORS Configuration
    cors_origins: list[str] | str = Field(
        default="http://localhost:5173,http://localhost:8888",
        description="Allowed CORS origins as a list or comma-separated string",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format"""
        if v.startswith("sqlite://"):
            if os.environ.get("ENVIRONMENT") == "production":
                raise ValueError("SQLite cannot be used in production")
            return v
        if not v.startswith(("postgresql://", "postgresql+psycopg2://", "postgres://")):
            raise ValueError(
                "Database URL must be a PostgreSQL or SQLite connection string"
            )
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list, supporting both list and comma-separated string"""
        if isinstance(self.cors_origins, str):
            return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return self.cors_origins

    @property
    def approved_emails_list(self) -> list[str]:
        """Approved emails, lower-cased"""
        if isinstance(self.approved_emails, str):
            emails = self.approved_emails.split(",")
        else:
            emails = self.approved_emails
        return [e.strip().lower() for e in emails if e.strip()]

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )


# Global settings instance
settings = Settings()
